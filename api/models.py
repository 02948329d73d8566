from decimal import Decimal

from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db.models.signals import post_save
from django.dispatch import receiver

User = get_user_model()


class UserProfile(models.Model):
    """
    Persisted identity attributes used for every authorization decision.

    The role and company stored here are the only source the scope resolver
    trusts; nothing sent by the client can override them.
    """

    ROLE_SUPER_ADMIN = 'super_admin'
    ROLE_AGENCY_ADMIN = 'agency_admin'
    ROLE_STAFF = 'staff'
    ROLE_CLIENT = 'client'

    ROLE_CHOICES = [
        (ROLE_SUPER_ADMIN, '슈퍼 어드민'),
        (ROLE_AGENCY_ADMIN, '대행사 어드민'),
        (ROLE_STAFF, '직원'),
        (ROLE_CLIENT, '클라이언트'),
    ]

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='profile'
    )
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_CLIENT,
        db_index=True,
        help_text="Platform role; drives every scope decision"
    )
    company = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        db_index=True,
        help_text="Tenant identifier. Empty means no company affiliation"
    )
    contact = models.CharField(
        max_length=50,
        blank=True,
        help_text="Phone number or other contact handle"
    )
    incentive_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
        help_text="Incentive rate applied to the user's sales margin (%)"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "User Profile"
        verbose_name_plural = "User Profiles"
        ordering = ['user__username']
        indexes = [
            models.Index(fields=['company', 'role'], name='profile_company_role_idx'),
        ]

    def __str__(self):
        return f"{self.user.username} ({self.get_role_display()})"

    def save(self, *args, **kwargs):
        # Blank company must never behave like a shared tenant
        if self.company is not None:
            self.company = self.company.strip() or None
        super().save(*args, **kwargs)

    @property
    def is_super_admin(self):
        return self.role == self.ROLE_SUPER_ADMIN

    @property
    def is_agency_admin(self):
        return self.role == self.ROLE_AGENCY_ADMIN

    @property
    def is_admin(self):
        """Super admins and agency admins."""
        return self.role in (self.ROLE_SUPER_ADMIN, self.ROLE_AGENCY_ADMIN)

    @property
    def is_staff_member(self):
        return self.role == self.ROLE_STAFF

    @property
    def is_client(self):
        return self.role == self.ROLE_CLIENT


class CompanyLogo(models.Model):
    """
    Logo per company. A row with no company is the platform default logo.
    """
    company = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        unique=True,
        help_text="Company this logo belongs to (empty = default logo)"
    )
    logo_url = models.TextField(
        help_text="Logo URL or data URI"
    )
    uploaded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='uploaded_logos'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Company Logo"
        verbose_name_plural = "Company Logos"
        ordering = ['company']

    def __str__(self):
        return f"Logo for {self.company or 'default'}"


@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    """
    Automatically create a UserProfile when a new User is created.
    Default role is 'client' with no company; admins promote from there.
    """
    if created:
        UserProfile.objects.get_or_create(user=instance)

