import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150)),
                ("company", models.CharField(max_length=150)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("username", models.CharField(blank=True, max_length=150, null=True, unique=True)),
                ("password_hash", models.CharField(blank=True, max_length=128)),
                ("status", models.CharField(choices=[("Active", "Active"), ("Archived", "Archived")], default="Active", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["status"], name="agency_acco_status_1c7e0b_idx")],
            },
        ),
        migrations.CreateModel(
            name="ExchangeRate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("currency", models.CharField(max_length=3)),
                ("rate_to_base", models.DecimalField(decimal_places=6, max_digits=20)),
                ("date", models.DateField()),
            ],
            options={
                "verbose_name_plural": "Exchange rates",
                "ordering": ["-date"],
                "unique_together": {("currency", "date")},
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
                ("currency", models.CharField(choices=[("TRY", "Turkish Lira"), ("USD", "US Dollar"), ("EUR", "Euro"), ("GBP", "British Pound")], default="TRY", max_length=3)),
                ("category", models.CharField(choices=[("Software", "Software"), ("Rent", "Rent"), ("Salaries", "Salaries"), ("Marketing", "Marketing"), ("Misc", "Misc")], default="Misc", max_length=20)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("client", models.CharField(max_length=200)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
                ("currency", models.CharField(choices=[("TRY", "Turkish Lira"), ("USD", "US Dollar"), ("EUR", "Euro"), ("GBP", "British Pound")], default="TRY", max_length=3)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("status", models.CharField(choices=[("Paid", "Paid"), ("Pending", "Pending"), ("Overdue", "Overdue")], default="Pending", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="invoices", to="agency.account")),
            ],
            options={
                "ordering": ["-date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("client", models.CharField(max_length=200)),
                ("category", models.CharField(blank=True, max_length=100)),
                ("year", models.CharField(blank=True, max_length=10)),
                ("description", models.TextField(blank=True)),
                ("status", models.CharField(choices=[("Planning", "Planning"), ("In Progress", "In Progress"), ("Review", "Review"), ("Completed", "Completed")], default="Planning", max_length=20)),
                ("progress", models.PositiveSmallIntegerField(default=0, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ("files", models.JSONField(blank=True, default=list)),
                ("team", models.JSONField(blank=True, default=list)),
                ("gallery", models.JSONField(blank=True, default=list)),
                ("sync_key", models.CharField(blank=True, max_length=255, null=True, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("linked_account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="projects", to="agency.account")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["status"], name="agency_proj_status_8f2d4a_idx"),
                    models.Index(fields=["title", "client"], name="agency_proj_title_3b9c61_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Proposal",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("client_name", models.CharField(max_length=200)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("valid_until", models.DateField(blank=True, null=True)),
                ("currency", models.CharField(choices=[("TRY", "Turkish Lira"), ("USD", "US Dollar"), ("EUR", "Euro"), ("GBP", "British Pound")], default="TRY", max_length=3)),
                ("currency_symbol", models.CharField(blank=True, max_length=5)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=20, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ("show_tax", models.BooleanField(default=True)),
                ("use_direct_total", models.BooleanField(default=False)),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
                ("status", models.CharField(choices=[("Draft", "Draft"), ("Sent", "Sent"), ("Accepted", "Accepted"), ("Rejected", "Rejected")], default="Draft", max_length=10)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="proposals", to="agency.account")),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="LineItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField(default=0)),
                ("description", models.CharField(blank=True, max_length=255)),
                ("quantity", models.DecimalField(decimal_places=2, default=1, max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ("unit_price", models.DecimalField(decimal_places=2, default=0, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
                ("total", models.DecimalField(decimal_places=2, default=0, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
                ("pricing", models.CharField(blank=True, choices=[("unit", "Quantity x unit price"), ("manual", "Manual total")], max_length=10)),
                ("proposal", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="agency.proposal")),
            ],
            options={
                "ordering": ["position", "id"],
            },
        ),
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("status", models.CharField(choices=[("To Do", "To Do"), ("In Progress", "In Progress"), ("Done", "Done")], default="To Do", max_length=20)),
                ("priority", models.CharField(choices=[("Low", "Low"), ("Medium", "Medium"), ("High", "High")], default="Medium", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("project", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="tasks", to="agency.project")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("Debt", "Debt"), ("Payment", "Payment")], max_length=10)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(0)])),
                ("description", models.CharField(blank=True, max_length=255)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="transactions", to="agency.account")),
            ],
            options={
                "ordering": ["id"],
                "indexes": [models.Index(fields=["account", "type"], name="agency_tran_account_5e1a7c_idx")],
            },
        ),
    ]
