from django.db import models


class Country(models.Model):
    """Countries vehicles are bought in or shipped to"""
    code = models.CharField(max_length=3, unique=True)
    name_en = models.CharField(max_length=100)
    name_ka = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name_en

    class Meta:
        db_table = 'countries'
        ordering = ['name_en']
        verbose_name_plural = 'countries'


class State(models.Model):
    """States, provinces and regions"""
    code = models.CharField(max_length=10)
    name_en = models.CharField(max_length=100)
    name_ka = models.CharField(max_length=100)
    country = models.ForeignKey(Country, on_delete=models.PROTECT, related_name='states')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name_en} ({self.code})"

    class Meta:
        db_table = 'states'
        ordering = ['name_en']
        unique_together = [['country', 'code']]


class City(models.Model):
    name = models.CharField(max_length=100)
    state = models.ForeignKey(State, on_delete=models.PROTECT, related_name='cities')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'cities'
        ordering = ['name']
        verbose_name_plural = 'cities'


class Port(models.Model):
    """Origin ports (US/CA) and destination ports (GE)"""
    name = models.CharField(max_length=100)
    is_destination = models.BooleanField(default=False)
    state = models.ForeignKey(State, on_delete=models.PROTECT, related_name='ports')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'ports'
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_destination'], name='ports_destination_idx'),
        ]
