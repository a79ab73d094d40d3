"""Reference data loaded by the seed_reference_data command"""

COUNTRIES = [
    ('US', 'United States', 'ამერიკის შეერთებული შტატები'),
    ('CA', 'Canada', 'კანადა'),
    ('GE', 'Georgia', 'საქართველო'),
]

# country code -> [(state code, name_en, name_ka)]
STATES = {
    'US': [
        ('AL', 'Alabama', 'ალაბამა'), ('AK', 'Alaska', 'ალასკა'), ('AZ', 'Arizona', 'არიზონა'),
        ('AR', 'Arkansas', 'არკანზასი'), ('CA', 'California', 'კალიფორნია'), ('CO', 'Colorado', 'კოლორადო'),
        ('CT', 'Connecticut', 'კონექტიკუტი'), ('DE', 'Delaware', 'დელავერი'), ('FL', 'Florida', 'ფლორიდა'),
        ('GA', 'Georgia', 'ჯორჯია'), ('HI', 'Hawaii', 'ჰავაი'), ('ID', 'Idaho', 'აიდაჰო'),
        ('IL', 'Illinois', 'ილინოისი'), ('IN', 'Indiana', 'ინდიანა'), ('IA', 'Iowa', 'აიოვა'),
        ('KS', 'Kansas', 'კანზასი'), ('KY', 'Kentucky', 'კენტუკი'), ('LA', 'Louisiana', 'ლუიზიანა'),
        ('ME', 'Maine', 'მეინი'), ('MD', 'Maryland', 'მერილენდი'), ('MA', 'Massachusetts', 'მასაჩუსეტსი'),
        ('MI', 'Michigan', 'მიჩიგანი'), ('MN', 'Minnesota', 'მინესოტა'), ('MS', 'Mississippi', 'მისისიპი'),
        ('MO', 'Missouri', 'მისური'), ('MT', 'Montana', 'მონტანა'), ('NE', 'Nebraska', 'ნებრასკა'),
        ('NV', 'Nevada', 'ნევადა'), ('NH', 'New Hampshire', 'ნიუ ჰემფშირი'), ('NJ', 'New Jersey', 'ნიუ ჯერსი'),
        ('NM', 'New Mexico', 'ნიუ მექსიკო'), ('NY', 'New York', 'ნიუ იორკი'),
        ('NC', 'North Carolina', 'ჩრდილოეთ კაროლინა'), ('ND', 'North Dakota', 'ჩრდილოეთ დაკოტა'),
        ('OH', 'Ohio', 'ოჰაიო'), ('OK', 'Oklahoma', 'ოკლაჰომა'), ('OR', 'Oregon', 'ორეგონი'),
        ('PA', 'Pennsylvania', 'პენსილვანია'), ('RI', 'Rhode Island', 'როდ აილენდი'),
        ('SC', 'South Carolina', 'სამხრეთ კაროლინა'), ('SD', 'South Dakota', 'სამხრეთ დაკოტა'),
        ('TN', 'Tennessee', 'ტენესი'), ('TX', 'Texas', 'ტეხასი'), ('UT', 'Utah', 'იუტა'),
        ('VT', 'Vermont', 'ვერმონტი'), ('VA', 'Virginia', 'ვირჯინია'), ('WA', 'Washington', 'ვაშინგტონი'),
        ('WV', 'West Virginia', 'დასავლეთ ვირჯინია'), ('WI', 'Wisconsin', 'ვისკონსინი'),
        ('WY', 'Wyoming', 'ვაიომინგი'),
    ],
    'CA': [
        ('AB', 'Alberta', 'ალბერტა'), ('BC', 'British Columbia', 'ბრიტანეთის კოლუმბია'),
        ('MB', 'Manitoba', 'მანიტობა'), ('NB', 'New Brunswick', 'ნიუ ბრანსვიკი'),
        ('NL', 'Newfoundland and Labrador', 'ნიუფაუნდლენდი და ლაბრადორი'), ('NS', 'Nova Scotia', 'ნოვა სკოტია'),
        ('NT', 'Northwest Territories', 'ჩრდილო-დასავლეთის ტერიტორიები'), ('NU', 'Nunavut', 'ნუნავუტი'),
        ('ON', 'Ontario', 'ონტარიო'), ('PE', 'Prince Edward Island', 'პრინც ედუარდის კუნძული'),
        ('QC', 'Quebec', 'კვებეკი'), ('SK', 'Saskatchewan', 'სასკაჩევანი'), ('YT', 'Yukon', 'იუკონი'),
    ],
    'GE': [
        ('AJ', 'Adjara', 'აჭარა'),
        ('SZ', 'Samegrelo-Zemo Svaneti', 'სამეგრელო-ზემო სვანეთი'),
    ],
}

# (country code, state code, port name, is_destination)
PORTS = [
    ('US', 'CA', 'Los Angeles', False), ('US', 'CA', 'Long Beach', False), ('US', 'CA', 'Oakland', False),
    ('US', 'CA', 'San Diego', False), ('US', 'TX', 'Houston', False), ('US', 'TX', 'Galveston', False),
    ('US', 'TX', 'Freeport', False), ('US', 'FL', 'Jacksonville', False), ('US', 'FL', 'Miami', False),
    ('US', 'FL', 'Tampa', False), ('US', 'FL', 'Fort Lauderdale', False), ('US', 'GA', 'Savannah', False),
    ('US', 'GA', 'Brunswick', False), ('US', 'NJ', 'New York/Newark', False), ('US', 'MD', 'Baltimore', False),
    ('US', 'VA', 'Norfolk', False), ('US', 'SC', 'Charleston', False), ('US', 'LA', 'New Orleans', False),
    ('US', 'WA', 'Seattle', False), ('US', 'WA', 'Tacoma', False),
    ('CA', 'BC', 'Vancouver', False), ('CA', 'BC', 'Prince Rupert', False), ('CA', 'QC', 'Montreal', False),
    ('CA', 'NS', 'Halifax', False), ('CA', 'ON', 'Toronto', False), ('CA', 'NB', 'Saint John', False),
    ('GE', 'SZ', 'Poti', True),
    ('GE', 'AJ', 'Batumi', True),
]

AUCTIONS = ['Copart', 'IAAI', 'Manheim']

# (order, name_en, name_ka, color)
STATUSES = [
    (1, 'Purchased', 'შეძენილი', '#6366F1'),
    (2, 'In Transit to Port', 'პორტისკენ მიმავალი', '#8B5CF6'),
    (3, 'At US/CA Port', 'აშშ/კანადის პორტში', '#A855F7'),
    (4, 'Loaded on Ship', 'გემზე ჩატვირთული', '#D946EF'),
    (5, 'In Transit (Sea)', 'ზღვით ტრანზიტში', '#EC4899'),
    (6, 'Arrived at GE Port', 'საქართველოს პორტში', '#F43F5E'),
    (7, 'Customs Clearance', 'განბაჟება', '#F97316'),
    (8, 'Ready for Pickup', 'მზადაა გასატანად', '#EAB308'),
    (9, 'Delivered', 'მიწოდებული', '#22C55E'),
]

MAKES_AND_MODELS = {
    'Toyota': ['Camry', 'Corolla', 'RAV4', 'Highlander', 'Tacoma', 'Tundra', '4Runner', 'Prius', 'Sienna',
               'Avalon', 'Land Cruiser', 'Sequoia', 'Supra', 'GR86', 'Venza', 'C-HR'],
    'Honda': ['Civic', 'Accord', 'CR-V', 'Pilot', 'HR-V', 'Odyssey', 'Ridgeline', 'Passport', 'Fit', 'Insight'],
    'Ford': ['F-150', 'Mustang', 'Explorer', 'Escape', 'Edge', 'Bronco', 'Ranger', 'Expedition', 'Maverick',
             'Transit', 'F-250', 'F-350'],
    'Chevrolet': ['Silverado', 'Equinox', 'Tahoe', 'Suburban', 'Traverse', 'Malibu', 'Camaro', 'Corvette',
                  'Colorado', 'Blazer', 'Trax', 'Spark'],
    'BMW': ['3 Series', '5 Series', '7 Series', 'X3', 'X5', 'X7', 'X1', 'X6', 'M3', 'M5', 'i4', 'iX',
            '4 Series', '8 Series'],
    'Mercedes-Benz': ['C-Class', 'E-Class', 'S-Class', 'GLE', 'GLC', 'GLS', 'A-Class', 'CLA', 'AMG GT',
                      'G-Class', 'EQS', 'EQE'],
    'Audi': ['A4', 'A6', 'A8', 'Q5', 'Q7', 'Q3', 'Q8', 'e-tron', 'A3', 'A5', 'RS6', 'R8', 'TT'],
    'Lexus': ['RX', 'ES', 'NX', 'GX', 'LX', 'IS', 'LS', 'UX', 'LC', 'RC'],
    'Nissan': ['Altima', 'Sentra', 'Rogue', 'Pathfinder', 'Murano', 'Frontier', 'Titan', 'Maxima', 'Kicks',
               'Armada', '370Z', 'GT-R'],
    'Hyundai': ['Elantra', 'Sonata', 'Tucson', 'Santa Fe', 'Palisade', 'Kona', 'Venue', 'Ioniq 5', 'Ioniq 6',
                'Genesis'],
    'Kia': ['Forte', 'K5', 'Sportage', 'Sorento', 'Telluride', 'Seltos', 'Soul', 'Carnival', 'EV6', 'Stinger'],
    'Volkswagen': ['Jetta', 'Passat', 'Tiguan', 'Atlas', 'Golf', 'ID.4', 'Taos', 'Arteon', 'Golf GTI', 'Golf R'],
    'Subaru': ['Outback', 'Forester', 'Crosstrek', 'Impreza', 'Ascent', 'Legacy', 'WRX', 'BRZ', 'Solterra'],
    'Mazda': ['Mazda3', 'Mazda6', 'CX-5', 'CX-9', 'CX-30', 'CX-50', 'MX-5 Miata', 'CX-90'],
    'Jeep': ['Wrangler', 'Grand Cherokee', 'Cherokee', 'Compass', 'Renegade', 'Gladiator', 'Wagoneer',
             'Grand Wagoneer'],
    'Dodge': ['Charger', 'Challenger', 'Durango', 'Hornet'],
    'Ram': ['1500', '2500', '3500', 'ProMaster'],
    'GMC': ['Sierra', 'Yukon', 'Acadia', 'Terrain', 'Canyon', 'Hummer EV'],
    'Cadillac': ['Escalade', 'XT5', 'XT6', 'CT5', 'CT4', 'Lyriq', 'XT4'],
    'Porsche': ['911', 'Cayenne', 'Macan', 'Panamera', 'Taycan', '718 Cayman', '718 Boxster'],
    'Tesla': ['Model 3', 'Model Y', 'Model S', 'Model X', 'Cybertruck'],
    'Volvo': ['XC90', 'XC60', 'XC40', 'S60', 'S90', 'V60', 'V90', 'C40'],
}

ADMIN_EMAIL = 'admin@autodashboard.ge'
ADMIN_NAME = 'Administrator'
