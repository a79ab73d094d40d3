from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from autodashboard.locations.models import City, Port


class TowingPrice(models.Model):
    """Inland towing from an auction city to an origin port"""
    city = models.ForeignKey(City, on_delete=models.CASCADE, related_name='towing_prices')
    port = models.ForeignKey(Port, on_delete=models.CASCADE, related_name='towing_prices')
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.city.name} -> {self.port.name}: ${self.price}"

    class Meta:
        db_table = 'towing_prices'
        unique_together = [['city', 'port']]


class ShippingPrice(models.Model):
    """Ocean freight between an origin port and a destination port"""
    origin_port = models.ForeignKey(Port, on_delete=models.CASCADE, related_name='shipping_prices_from')
    destination_port = models.ForeignKey(Port, on_delete=models.CASCADE, related_name='shipping_prices_to')
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.origin_port.name} -> {self.destination_port.name}: ${self.price}"

    class Meta:
        db_table = 'shipping_prices'
        unique_together = [['origin_port', 'destination_port']]


class InsurancePrice(models.Model):
    """Insurance fee for vehicles valued within [min_value, max_value]"""
    min_value = models.DecimalField(max_digits=12, decimal_places=2)
    max_value = models.DecimalField(max_digits=12, decimal_places=2)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"${self.min_value} - ${self.max_value}: ${self.price}"

    class Meta:
        db_table = 'insurance_prices'
        ordering = ['min_value']
