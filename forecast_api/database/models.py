"""
Tortoise ORM models for the forecast database.
"""
from tortoise import fields
from tortoise.models import Model


class City(Model):
    """Resolved coordinates for a city name, stored on first lookup."""

    id = fields.BigIntField(primary_key=True)
    # Unbounded text: any caller string is a valid key. Not unique, since
    # concurrent misses in separate processes may insert twice.
    name = fields.TextField()
    latitude = fields.FloatField()
    longitude = fields.FloatField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "cities"
        indexes = (("name",),)

    def __str__(self):
        return f"City(name={self.name}, latitude={self.latitude}, longitude={self.longitude})"
