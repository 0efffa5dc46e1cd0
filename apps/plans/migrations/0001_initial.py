import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Plan',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('planned', 'Planned'), ('group-swipe', 'Group swipe')], default='planned', max_length=20)),
                ('status', models.CharField(choices=[('voting', 'Voting'), ('confirmed', 'Confirmed'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='voting', max_length=20)),
                ('title', models.CharField(max_length=200)),
                ('date', models.DateField(blank=True, null=True)),
                ('time', models.CharField(blank=True, max_length=20)),
                ('cuisine', models.CharField(default='Any', max_length=100)),
                ('budget', models.CharField(default='$$', max_length=20)),
                ('restaurant_options', models.JSONField(blank=True, default=list)),
                ('swipes_completed', models.JSONField(blank=True, default=list)),
                ('votes', models.JSONField(blank=True, default=dict)),
                ('restaurant', models.JSONField(blank=True, null=True)),
                ('rsvp_deadline', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='owned_plans', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'plans',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'created_at'], name='plans_owner_created_idx'),
                    models.Index(fields=['status'], name='plans_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PlanInvite',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('avatar_uri', models.URLField(blank=True, max_length=500)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('accepted', 'Accepted'), ('declined', 'Declined')], default='pending', max_length=20)),
                ('responded_at', models.DateTimeField(blank=True, null=True)),
                ('invited_at', models.DateTimeField(auto_now_add=True)),
                ('plan', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='invites', to='plans.plan')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='plan_invites', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'plan_invites',
                'ordering': ['invited_at'],
                'indexes': [
                    models.Index(fields=['user', 'status'], name='plan_invites_user_status_idx'),
                ],
                'unique_together': {('plan', 'user')},
            },
        ),
    ]
