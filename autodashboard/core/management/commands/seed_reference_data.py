import os

from django.core.management.base import BaseCommand
from django.db import transaction

from autodashboard.catalog.models import Make, VehicleModel, Auction, Status
from autodashboard.core import seed_data
from autodashboard.core.cache_signals import suspend_cache_signals
from autodashboard.core.cache_utils import invalidate_reference_cache, invalidate_dashboard_cache
from autodashboard.core.models import User
from autodashboard.locations.models import Country, State, Port


class Command(BaseCommand):
    help = 'Loads countries, states, ports, auctions, statuses, makes/models and the admin user'

    def add_arguments(self, parser):
        parser.add_argument(
            '--skip-admin',
            action='store_true',
            help='Do not create the admin user',
        )

    def handle(self, *args, **options):
        with suspend_cache_signals(), transaction.atomic():
            self._seed_locations()
            self._seed_catalog()
            if not options['skip_admin']:
                self._seed_admin()

        invalidate_reference_cache()
        invalidate_dashboard_cache()
        self.stdout.write(self.style.SUCCESS("\nReference data seeded."))

    def _seed_locations(self):
        countries = {}
        for code, name_en, name_ka in seed_data.COUNTRIES:
            countries[code], _ = Country.objects.get_or_create(
                code=code, defaults={'name_en': name_en, 'name_ka': name_ka}
            )
        self.stdout.write(f"  - {len(countries)} countries")

        states = {}
        for country_code, rows in seed_data.STATES.items():
            for code, name_en, name_ka in rows:
                states[(country_code, code)], _ = State.objects.get_or_create(
                    country=countries[country_code], code=code,
                    defaults={'name_en': name_en, 'name_ka': name_ka},
                )
        self.stdout.write(f"  - {len(states)} states/provinces/regions")

        for country_code, state_code, name, is_destination in seed_data.PORTS:
            Port.objects.get_or_create(
                state=states[(country_code, state_code)], name=name,
                defaults={'is_destination': is_destination},
            )
        self.stdout.write(f"  - {len(seed_data.PORTS)} ports")

    def _seed_catalog(self):
        for name in seed_data.AUCTIONS:
            Auction.objects.get_or_create(name=name)
        self.stdout.write(f"  - {len(seed_data.AUCTIONS)} auctions")

        for order, name_en, name_ka, color in seed_data.STATUSES:
            Status.objects.get_or_create(
                order=order, defaults={'name_en': name_en, 'name_ka': name_ka, 'color': color}
            )
        self.stdout.write(f"  - {len(seed_data.STATUSES)} statuses")

        model_count = 0
        for make_name, model_names in seed_data.MAKES_AND_MODELS.items():
            make, _ = Make.objects.get_or_create(name=make_name)
            for model_name in model_names:
                VehicleModel.objects.get_or_create(make=make, name=model_name)
                model_count += 1
        self.stdout.write(f"  - {len(seed_data.MAKES_AND_MODELS)} makes, {model_count} models")

    def _seed_admin(self):
        if User.objects.filter(email=seed_data.ADMIN_EMAIL).exists():
            self.stdout.write(f"  - admin {seed_data.ADMIN_EMAIL} already exists")
            return
        User.objects.create_superuser(
            email=seed_data.ADMIN_EMAIL,
            password=os.getenv('ADMIN_PASSWORD', 'admin123'),
            name=seed_data.ADMIN_NAME,
        )
        self.stdout.write(self.style.SUCCESS(f"  - admin {seed_data.ADMIN_EMAIL} created"))
