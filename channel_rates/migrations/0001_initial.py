from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def percent_validators():
    return [
        django.core.validators.MinValueValidator(Decimal('0.00')),
        django.core.validators.MaxValueValidator(Decimal('100.00')),
    ]


def discount_fields():
    fields = []
    for kind in ('mobile', 'genius', 'seasonal', 'first_minute', 'last_minute'):
        fields.append((f'{kind}_percent', models.DecimalField(
            decimal_places=2, default=Decimal('0.00'), max_digits=5,
            validators=percent_validators(),
        )))
        fields.append((f'{kind}_enabled', models.BooleanField(default=True)))
    return fields


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Property',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Property name', max_length=200)),
                ('code', models.SlugField(help_text="URL-friendly code (e.g., 'villa-baltica')", unique=True)),
                ('hotres_object_id', models.CharField(blank=True, default='', help_text='Object id (oid) in the Hotres panel', max_length=20)),
                ('currency_symbol', models.CharField(default='zł', help_text='Currency symbol to display', max_length=5)),
                ('notes', models.TextField(blank=True, default='')),
                ('sort_order', models.PositiveIntegerField(default=0, help_text='Display order')),
                ('is_active', models.BooleanField(default=True, help_text='Whether this property is active')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Property',
                'verbose_name_plural': 'Properties',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='e.g., Summer 2025', max_length=100)),
                ('is_default', models.BooleanField(default=False, help_text='Profile used when none is requested explicitly')),
                ('obp_enabled', models.BooleanField(default=True, help_text='Deduct an amount per guest below maximum occupancy')),
                ('default_obp_per_person', models.DecimalField(decimal_places=2, default=Decimal('30.00'), help_text='OBP deduction per missing guest when room and season set none', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('meal_plans_enabled', models.BooleanField(default=False, help_text='Add per-person meal prices to the direct price')),
                ('default_breakfast_price', models.DecimalField(decimal_places=2, default=Decimal('50.00'), help_text='Breakfast price per person', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('default_full_board_price', models.DecimalField(decimal_places=2, default=Decimal('100.00'), help_text='Full board price per person', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('min_price', models.DecimalField(decimal_places=2, default=Decimal('50.00'), help_text='Direct prices are never lower than this', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('hotel', models.ForeignKey(help_text='Property this profile belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='profiles', to='channel_rates.property')),
            ],
            options={
                'verbose_name': 'Pricing Profile',
                'verbose_name_plural': 'Pricing Profiles',
                'ordering': ['hotel', '-is_default', 'name'],
                'unique_together': {('hotel', 'name')},
            },
        ),
        migrations.CreateModel(
            name='Season',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='e.g., Pre-Peak, Peak', max_length=100)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('multiplier', models.DecimalField(decimal_places=2, default=Decimal('1.00'), help_text='Applied to the room base price (1.00 = peak price)', max_digits=4, validators=[django.core.validators.MinValueValidator(Decimal('0.01')), django.core.validators.MaxValueValidator(Decimal('5.00'))])),
                ('min_nights', models.PositiveIntegerField(default=1, help_text='Minimum length of stay', validators=[django.core.validators.MinValueValidator(1)])),
                ('obp_enabled', models.BooleanField(default=True, help_text='Apply OBP deductions in this season')),
                ('obp_per_person', models.DecimalField(blank=True, decimal_places=2, help_text='OBP amount for this season (blank = profile default)', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('profile', models.ForeignKey(help_text='Profile this season belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='seasons', to='channel_rates.profile')),
            ],
            options={
                'verbose_name': 'Season',
                'verbose_name_plural': 'Seasons',
                'ordering': ['profile', 'start_date', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='RoomType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='e.g., Studio, Cottage', max_length=100)),
                ('max_occupancy', models.PositiveIntegerField(default=2, help_text='Maximum number of guests', validators=[django.core.validators.MinValueValidator(1)])),
                ('units', models.PositiveIntegerField(default=1, help_text='Number of rooms of this type')),
                ('base_price_peak', models.DecimalField(decimal_places=2, help_text='Price per night at maximum occupancy in peak season', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('obp_per_person', models.DecimalField(blank=True, decimal_places=2, help_text='OBP deduction per missing guest (blank = season/profile default)', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('min_obp_occupancy', models.PositiveIntegerField(blank=True, help_text='Guests below this count are charged as this count', null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('breakfast_price', models.DecimalField(blank=True, decimal_places=2, help_text='Breakfast price per person (blank = profile default)', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('full_board_price', models.DecimalField(blank=True, decimal_places=2, help_text='Full board price per person (blank = profile default)', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('hotres_type_id', models.CharField(blank=True, default='', help_text='Room type id in the Hotres panel', max_length=20)),
                ('sort_order', models.PositiveIntegerField(default=0, help_text='Display order')),
                ('profile', models.ForeignKey(help_text='Profile this room type belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='room_types', to='channel_rates.profile')),
            ],
            options={
                'verbose_name': 'Room Type',
                'verbose_name_plural': 'Room Types',
                'ordering': ['profile', 'sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='RoomTypeSeasonConfig',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('base_price', models.DecimalField(blank=True, decimal_places=2, help_text='Base price in this season (blank = peak price)', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('obp_active', models.BooleanField(default=True, help_text='Apply OBP to this room in this season')),
                ('obp_per_person', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('min_obp_occupancy', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)])),
                ('meal_option', models.CharField(choices=[('none', 'Room Only'), ('breakfast', 'Breakfast'), ('full', 'Full Board')], default='none', max_length=20)),
                ('breakfast_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('full_board_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('comment', models.CharField(blank=True, default='', max_length=200)),
                ('occupancy_rate', models.DecimalField(blank=True, decimal_places=2, help_text='Last occupancy % read from Hotres (informational)', max_digits=5, null=True, validators=percent_validators())),
                ('room_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='season_configs', to='channel_rates.roomtype')),
                ('season', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='room_configs', to='channel_rates.season')),
            ],
            options={
                'verbose_name': 'Room Type Season Config',
                'verbose_name_plural': 'Room Type Season Configs',
                'ordering': ['season__start_date', 'room_type__sort_order'],
                'unique_together': {('room_type', 'season')},
            },
        ),
        migrations.CreateModel(
            name='Channel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *discount_fields(),
                ('code', models.SlugField(help_text="Identifier used in grids and exports (e.g., 'booking')")),
                ('name', models.CharField(help_text='e.g., Booking.com', max_length=100)),
                ('commission_percent', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Commission taken on the sold price', max_digits=5, validators=percent_validators())),
                ('color', models.CharField(blank=True, default='', help_text='Hex display color', max_length=7)),
                ('hotres_rate_id', models.CharField(blank=True, default='', help_text='Rate id in the Hotres panel (blank = not pushed)', max_length=20)),
                ('discount_labels', models.JSONField(blank=True, default=dict, help_text='Custom display names per discount kind, e.g. {"seasonal": "Early Summer"}')),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.PositiveIntegerField(default=0, help_text='Display order')),
                ('profile', models.ForeignKey(help_text='Profile this channel belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='channels', to='channel_rates.profile')),
            ],
            options={
                'verbose_name': 'Channel',
                'verbose_name_plural': 'Channels',
                'ordering': ['profile', 'sort_order', 'name'],
                'unique_together': {('profile', 'code')},
            },
        ),
        migrations.CreateModel(
            name='ChannelSeasonDiscount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *discount_fields(),
                ('is_customized', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True)),
                ('channel', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='season_discounts', to='channel_rates.channel')),
                ('season', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='channel_discounts', to='channel_rates.season')),
            ],
            options={
                'verbose_name': 'Channel Season Discount',
                'verbose_name_plural': 'Channel Season Discounts',
                'ordering': ['season__start_date', 'channel__sort_order'],
                'unique_together': {('channel', 'season')},
            },
        ),
    ]
