"""
Test utilities and factories for creating test data
"""
from decimal import Decimal
import random
import string

from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from autodashboard.balances.models import BalanceRequest
from autodashboard.catalog.models import Make, VehicleModel, Auction, Status
from autodashboard.core.models import User
from autodashboard.invoices.models import Invoice, InvoiceItem
from autodashboard.locations.models import Country, State, City, Port
from autodashboard.vehicles.models import Vehicle

VIN_CHARS = 'ABCDEFGHJKLMNPRSTUVWXYZ0123456789'


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_vin():
        return ''.join(random.choices(VIN_CHARS, k=17))

    @staticmethod
    def create_admin(email=None, password='testpass123', **extra):
        if not email:
            email = f'admin_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            email=email,
            password=password,
            name=extra.pop('name', 'Test Admin'),
            role=User.ROLE_ADMIN,
            **extra
        )

    @staticmethod
    def create_dealer(email=None, password='testpass123', balance=Decimal('0.00'), **extra):
        """Create a test dealer"""
        if not email:
            email = f'dealer_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            email=email,
            password=password,
            name=extra.pop('name', f'Dealer {TestDataFactory.random_string(4)}'),
            phone=extra.pop('phone', '555123456'),
            address=extra.pop('address', 'Tbilisi, Rustaveli Ave 1'),
            role=User.ROLE_DEALER,
            balance=balance,
            **extra
        )

    @staticmethod
    def create_country(code=None, name_en=None):
        if not code:
            code = ''.join(random.choices(string.ascii_uppercase, k=3))
            while Country.objects.filter(code=code).exists():
                code = ''.join(random.choices(string.ascii_uppercase, k=3))
        return Country.objects.create(
            code=code,
            name_en=name_en or f'Country {code}',
            name_ka=f'ქვეყანა {code}',
        )

    @staticmethod
    def create_state(country=None, code=None, name_en=None):
        country = country or TestDataFactory.create_country()
        code = code or TestDataFactory.random_string(2).upper()
        return State.objects.create(
            country=country,
            code=code,
            name_en=name_en or f'State {code}',
            name_ka=f'შტატი {code}',
        )

    @staticmethod
    def create_city(state=None, name=None):
        return City.objects.create(
            state=state or TestDataFactory.create_state(),
            name=name or f'City_{TestDataFactory.random_string(6)}',
        )

    @staticmethod
    def create_port(state=None, name=None, is_destination=False):
        return Port.objects.create(
            state=state or TestDataFactory.create_state(),
            name=name or f'Port_{TestDataFactory.random_string(6)}',
            is_destination=is_destination,
        )

    @staticmethod
    def create_make(name=None):
        return Make.objects.create(name=name or f'Make_{TestDataFactory.random_string(6)}')

    @staticmethod
    def create_model(make=None, name=None):
        return VehicleModel.objects.create(
            make=make or TestDataFactory.create_make(),
            name=name or f'Model_{TestDataFactory.random_string(6)}',
        )

    @staticmethod
    def create_auction(name=None):
        return Auction.objects.create(name=name or f'Auction_{TestDataFactory.random_string(6)}')

    @staticmethod
    def create_status(order=1, name_en=None, color='#3B82F6'):
        name_en = name_en or f'Status_{TestDataFactory.random_string(6)}'
        return Status.objects.create(name_en=name_en, name_ka=f'სტატუსი {name_en}', order=order, color=color)

    @staticmethod
    def create_vehicle(dealer=None, status=None, port=None, transportation_price=Decimal('1500.00'), **extra):
        """Create a vehicle with its own make/model/auction/location unless given"""
        make = extra.pop('make', None) or TestDataFactory.create_make()
        model = extra.pop('model', None) or TestDataFactory.create_model(make=make)
        state = extra.pop('state', None) or TestDataFactory.create_state()
        return Vehicle.objects.create(
            dealer=dealer or TestDataFactory.create_dealer(),
            vin=extra.pop('vin', None) or TestDataFactory.random_vin(),
            year=extra.pop('year', 2020),
            make=make,
            model=model,
            auction=extra.pop('auction', None) or TestDataFactory.create_auction(),
            lot_number=extra.pop('lot_number', None) or str(random.randint(10000000, 99999999)),
            status=status or TestDataFactory.create_status(),
            country=state.country,
            state=state,
            port=port,
            transportation_price=transportation_price,
            **extra
        )

    @staticmethod
    def create_invoice(dealer, vehicles=None, status=Invoice.STATUS_PENDING, invoice_number=None):
        """Create an invoice directly (bypassing the invoice service)"""
        vehicles = vehicles or [TestDataFactory.create_vehicle(dealer=dealer)]
        invoice = Invoice.objects.create(
            invoice_number=invoice_number or f'INV-TEST-{TestDataFactory.random_string(6).upper()}',
            dealer=dealer,
            total_amount=sum((v.transportation_price for v in vehicles), Decimal('0.00')),
            status=status,
        )
        for vehicle in vehicles:
            InvoiceItem.objects.create(
                invoice=invoice,
                vehicle=vehicle,
                amount=vehicle.transportation_price,
                description=f'{vehicle.year} {vehicle.make.name} {vehicle.model.name} - VIN: {vehicle.vin}',
            )
        return invoice

    @staticmethod
    def create_balance_request(dealer, amount=Decimal('500.00'), status=BalanceRequest.STATUS_PENDING):
        return BalanceRequest.objects.create(
            dealer=dealer,
            amount=amount,
            receipt_url='https://cdn.example.com/receipts/1/receipt-lg.webp',
            status=status,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
