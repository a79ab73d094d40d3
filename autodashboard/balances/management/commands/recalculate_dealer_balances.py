from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import Sum

from autodashboard.balances.models import Transaction
from autodashboard.core.models import User


class Command(BaseCommand):
    help = 'Recomputes every dealer balance from the transaction ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report differences without saving changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE: No changes will be saved."))

        dealers = User.objects.filter(role=User.ROLE_DEALER).order_by('id')
        self.stdout.write(f"Checking balances for {dealers.count()} dealers...")

        fixed = 0
        with transaction.atomic():
            for dealer in dealers.select_for_update():
                ledger_total = Transaction.objects.filter(dealer=dealer).aggregate(s=Sum('amount'))['s'] or Decimal('0.00')
                if dealer.balance != ledger_total:
                    fixed += 1
                    self.stdout.write(self.style.NOTICE(
                        f"  - {dealer.email}: {dealer.balance} -> {ledger_total}"
                    ))
                    if not dry_run:
                        dealer.balance = ledger_total
                        dealer.save(update_fields=['balance', 'updated_at'])

            if dry_run:
                self.stdout.write(self.style.WARNING(f"\nDry run complete. {fixed} balance(s) differ."))
                transaction.set_rollback(True)
            else:
                self.stdout.write(self.style.SUCCESS(f"\nBalance recalculation complete. {fixed} balance(s) updated."))
