from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LootEntry",
            fields=[
                ("id", models.CharField(editable=False, max_length=40, primary_key=True, serialize=False)),
                ("timestamp", models.DateTimeField(db_index=True, verbose_name="Drop time")),
                ("character", models.CharField(db_index=True, max_length=100, verbose_name="Character")),
                ("character_class", models.CharField(blank=True, max_length=50, verbose_name="Class")),
                ("level", models.PositiveSmallIntegerField(blank=True, null=True, verbose_name="Character level")),
                ("difficulty", models.CharField(blank=True, max_length=20)),
                ("item_name", models.CharField(max_length=200, verbose_name="Item")),
                (
                    "item_id",
                    models.CharField(
                        blank=True,
                        help_text="Item identifier reported by the bot, used for metadata lookups",
                        max_length=100,
                    ),
                ),
                (
                    "quality",
                    models.CharField(
                        choices=[
                            ("normal", "Normal"),
                            ("magic", "Magic"),
                            ("rare", "Rare"),
                            ("set", "Set"),
                            ("unique", "Unique"),
                            ("rune", "Rune"),
                        ],
                        db_index=True,
                        default="normal",
                        max_length=10,
                    ),
                ),
                ("location", models.CharField(default="Unknown", max_length=200)),
                ("dropped_by", models.CharField(blank=True, max_length=200, verbose_name="Dropped by")),
                (
                    "stats",
                    models.JSONField(default=list, help_text="Rolled stat lines in the order the bot sent them"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Loot entry",
                "verbose_name_plural": "Loot entries",
                "db_table": "loot_entry",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(fields=["timestamp", "item_name", "character"], name="loot_entry_fingerprint_idx"),
                    models.Index(fields=["quality", "timestamp"], name="loot_entry_quality_idx"),
                ],
            },
        ),
    ]
