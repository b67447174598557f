from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Hero',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('subtitle', models.CharField(max_length=300)),
                ('image', models.URLField(max_length=500)),
                ('primary_button_text', models.CharField(default='Shop Collection', max_length=50)),
                ('secondary_button_text', models.CharField(default='Explore Lookbook', max_length=50)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'heroes',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='FooterSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('description', models.TextField(default='Discover luxury fashion that combines timeless elegance with modern style.')),
                ('address', models.CharField(default='123 Fashion Street, NY 10001', max_length=255)),
                ('phone', models.CharField(default='+1 (555) 123-4567', max_length=50)),
                ('email', models.EmailField(default='contact@evacurves.com', max_length=254)),
                ('facebook', models.CharField(blank=True, default='', max_length=255)),
                ('twitter', models.CharField(blank=True, default='', max_length=255)),
                ('instagram', models.CharField(blank=True, default='', max_length=255)),
                ('youtube', models.CharField(blank=True, default='', max_length=255)),
                ('newsletter_title', models.CharField(default='Join Our Newsletter', max_length=200)),
                ('newsletter_subtitle', models.CharField(default='Subscribe to get special offers, free giveaways, and exclusive deals.', max_length=300)),
                ('newsletter_placeholder', models.CharField(default='Enter your email', max_length=100)),
                ('newsletter_button_text', models.CharField(default='Subscribe', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'footer_settings',
                'verbose_name_plural': 'footer settings',
            },
        ),
        migrations.CreateModel(
            name='FooterLink',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('url', models.CharField(max_length=500)),
                ('section', models.CharField(choices=[('shop', 'Shop'), ('support', 'Support'), ('company', 'Company')], db_index=True, max_length=20)),
                ('order', models.IntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'footer_links',
                'ordering': ['section', 'order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Announcement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.CharField(max_length=300)),
                ('description', models.TextField(blank=True)),
                ('url', models.CharField(blank=True, max_length=500)),
                ('icon', models.CharField(default='Star', max_length=50)),
                ('icon_image', models.CharField(blank=True, max_length=500)),
                ('font_size', models.CharField(choices=[('xs', 'Extra Small'), ('sm', 'Small'), ('base', 'Medium'), ('lg', 'Large'), ('xl', 'Extra Large')], default='sm', max_length=10)),
                ('text_color', models.CharField(default='#FFFFFF', max_length=7)),
                ('background_color', models.CharField(default='#4F46E5', max_length=7)),
                ('platform', models.CharField(choices=[('web', 'Web Only'), ('mobile', 'Mobile Only'), ('both', 'Both')], default='both', max_length=10)),
                ('is_active', models.BooleanField(default=True)),
                ('order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'announcements',
                'ordering': ['order', 'id'],
            },
        ),
    ]
