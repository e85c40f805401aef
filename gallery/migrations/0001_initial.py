import gallery.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
                'verbose_name_plural': 'categories',
            },
        ),
        migrations.CreateModel(
            name='Gif',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.CharField(default=gallery.models.generate_slug, editable=False, max_length=32, unique=True)),
                ('filename', models.CharField(max_length=255)),
                ('original_name', models.CharField(max_length=500)),
                ('mime_type', models.CharField(choices=[('image/gif', 'GIF'), ('image/webp', 'WebP')], max_length=50)),
                ('size_bytes', models.BigIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('categories', models.ManyToManyField(blank=True, related_name='gifs', to='gallery.category')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
