from django.db import migrations, models


RESOURCE_CHOICES = [
    ("Halle 1", "Halle 1"),
    ("Halle 2", "Halle 2"),
    ("Halle 3", "Halle 3"),
    ("Bus Opel", "Bus Opel"),
    ("VW Bus weiß", "VW Bus weiß"),
    ("VW Bus silber", "VW Bus silber"),
    ("Besprechungsraum", "Besprechungsraum"),
    ("Kiosk", "Kiosk"),
    ("Vereinsheim", "Vereinsheim"),
    ("Raum Frankenried", "Raum Frankenried"),
    ("Raum Steinholz", "Raum Steinholz"),
    ("Zelt Sportplatz", "Zelt Sportplatz"),
    ("JBL Box", "JBL Box"),
]

GROUP_CHOICES = [
    ("Fußball", "Fußball"),
    ("Volleyball", "Volleyball"),
    ("Gymnastik", "Gymnastik"),
    ("Sonstige", "Sonstige"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("resource", models.CharField(choices=RESOURCE_CHOICES, max_length=64, verbose_name="Ressource")),
                ("group", models.CharField(choices=GROUP_CHOICES, max_length=32, verbose_name="Gruppe")),
                ("date", models.DateField(verbose_name="Datum")),
                (
                    "start_time",
                    models.PositiveSmallIntegerField(help_text="Minuten seit Mitternacht.", verbose_name="Startzeit"),
                ),
                (
                    "end_time",
                    models.PositiveSmallIntegerField(
                        help_text="Minuten seit Mitternacht, exklusiv.", verbose_name="Endzeit"
                    ),
                ),
                ("bus_destination", models.CharField(blank=True, max_length=255, verbose_name="Ziel der Fahrt")),
                ("purpose", models.CharField(blank=True, max_length=255, verbose_name="Verwendungszweck")),
                ("user", models.CharField(max_length=64, verbose_name="Benutzer-ID")),
                ("username", models.CharField(max_length=150, verbose_name="Angemeldet von")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Reservierung",
                "verbose_name_plural": "Reservierungen",
                "ordering": ["date", "start_time", "resource"],
                "indexes": [models.Index(fields=["resource", "date"], name="reservation_resource_day")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(start_time__lt=models.F("end_time")),
                        name="reservation_valid_window",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(end_time__lte=1440),
                        name="reservation_within_day",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ResourceDay",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("resource", models.CharField(max_length=64)),
                ("date", models.DateField()),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("resource", "date"), name="unique_resource_day"),
                ],
            },
        ),
    ]
