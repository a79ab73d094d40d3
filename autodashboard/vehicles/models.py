from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from autodashboard.catalog.models import Make, VehicleModel, Auction, Status
from autodashboard.locations.models import Country, State, City, Port


class Vehicle(models.Model):
    """A dealer's vehicle on its way from a US/CA auction to Georgia"""
    DAMAGE_CLEAN = 'CLEAN'
    DAMAGE_TYPE_CHOICES = [
        ('CLEAN', 'Clean'),
        ('SALVAGE', 'Salvage'),
        ('REBUILT', 'Rebuilt'),
        ('FLOOD', 'Flood'),
        ('VANDALISM', 'Vandalism'),
        ('HAIL', 'Hail'),
        ('MECHANICAL', 'Mechanical'),
        ('OTHER', 'Other'),
    ]

    dealer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='vehicles')
    vin = models.CharField(max_length=17, unique=True)
    year = models.PositiveIntegerField()
    make = models.ForeignKey(Make, on_delete=models.PROTECT, related_name='vehicles')
    model = models.ForeignKey(VehicleModel, on_delete=models.PROTECT, related_name='vehicles')
    color = models.CharField(max_length=50, blank=True, default='')
    damage_type = models.CharField(max_length=20, choices=DAMAGE_TYPE_CHOICES, default=DAMAGE_CLEAN)
    has_keys = models.BooleanField(default=False)

    auction = models.ForeignKey(Auction, on_delete=models.PROTECT, related_name='vehicles')
    lot_number = models.CharField(max_length=50)
    auction_link = models.URLField(max_length=500, blank=True, default='')

    status = models.ForeignKey(Status, on_delete=models.PROTECT, related_name='vehicles')
    country = models.ForeignKey(Country, on_delete=models.PROTECT, related_name='vehicles')
    state = models.ForeignKey(State, on_delete=models.PROTECT, related_name='vehicles')
    city = models.ForeignKey(City, on_delete=models.PROTECT, null=True, blank=True, related_name='vehicles')
    port = models.ForeignKey(Port, on_delete=models.PROTECT, null=True, blank=True, related_name='vehicles')

    ship_name = models.CharField(max_length=100, blank=True, default='')
    container_number = models.CharField(max_length=50, blank=True, default='')
    eta = models.DateField(null=True, blank=True)
    transportation_price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0'))]
    )

    is_archived = models.BooleanField(default=False)
    archived_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.year} {self.make.name} {self.model.name} ({self.vin})"

    @property
    def title(self):
        return f"{self.year} {self.make.name} {self.model.name}"

    class Meta:
        db_table = 'vehicles'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['dealer', 'is_archived'], name='vehicles_dealer_arch_idx'),
            models.Index(fields=['status', 'is_archived'], name='vehicles_status_arch_idx'),
            models.Index(fields=['lot_number'], name='vehicles_lot_idx'),
            models.Index(fields=['-created_at'], name='vehicles_created_idx'),
        ]


class VehiclePhoto(models.Model):
    STAGE_AUCTION = 'AUCTION'
    STAGE_PORT = 'PORT'
    STAGE_DELIVERY = 'DELIVERY'
    STAGE_CHOICES = [
        (STAGE_AUCTION, 'Auction'),
        (STAGE_PORT, 'Port'),
        (STAGE_DELIVERY, 'Delivery'),
    ]

    vehicle = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name='photos')
    url = models.URLField(max_length=500)
    stage = models.CharField(max_length=10, choices=STAGE_CHOICES)
    order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.vehicle.vin} {self.stage} #{self.order}"

    class Meta:
        db_table = 'vehicle_photos'
        ordering = ['order', 'id']


class VehicleStatusHistory(models.Model):
    """Append-only log of status transitions"""
    vehicle = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name='status_history')
    status = models.ForeignKey(Status, on_delete=models.PROTECT, related_name='history_entries')
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='status_changes'
    )
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'vehicle_status_history'
        ordering = ['-changed_at', '-id']
        verbose_name_plural = 'vehicle status history'


class VehicleComment(models.Model):
    vehicle = models.ForeignKey(Vehicle, on_delete=models.CASCADE, related_name='comments')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='vehicle_comments')
    content = models.TextField(max_length=2000)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'vehicle_comments'
        ordering = ['-created_at', '-id']
