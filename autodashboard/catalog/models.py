from django.core.validators import MinValueValidator, RegexValidator
from django.db import models

HEX_COLOR_VALIDATOR = RegexValidator(
    regex=r'^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$',
    message='Color must be a hex value like #RGB or #RRGGBB',
)


class Make(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'makes'
        ordering = ['name']


class VehicleModel(models.Model):
    name = models.CharField(max_length=100)
    make = models.ForeignKey(Make, on_delete=models.PROTECT, related_name='models')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.make.name} {self.name}"

    class Meta:
        db_table = 'vehicle_models'
        ordering = ['name']
        unique_together = [['make', 'name']]


class Auction(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'auctions'
        ordering = ['name']


class Status(models.Model):
    """Vehicle lifecycle status, shown in `order` along the route"""
    name_en = models.CharField(max_length=100)
    name_ka = models.CharField(max_length=100)
    order = models.PositiveIntegerField(default=0, validators=[MinValueValidator(0)])
    color = models.CharField(max_length=7, blank=True, default='', validators=[HEX_COLOR_VALIDATOR])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name_en

    class Meta:
        db_table = 'statuses'
        ordering = ['order', 'id']
        verbose_name_plural = 'statuses'
