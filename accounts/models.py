from django.contrib.auth.models import AbstractUser
from django.db import models
from phonenumber_field.modelfields import PhoneNumberField
import uuid


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.
    Logs in with email. Back-office access depends on `role`.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class UserRole(models.TextChoices):
        CUSTOMER = 'customer', 'Customer'
        EMPLOYEE = 'employee', 'Employee'
        ADMIN = 'admin', 'Administrator'

    email = models.EmailField(unique=True)

    full_name = models.CharField(max_length=200, blank=True)

    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.CUSTOMER,
        db_index=True,
        help_text="User's role in the farm back-office"
    )

    phone = PhoneNumberField(
        region='UG',  # Uganda
        blank=True,
        help_text="Phone number (Uganda format: +256XXXXXXXXX)"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'is_active'], name='users_role_active_idx'),
        ]

    def __str__(self):
        return f"{self.get_full_name()} ({self.get_role_display()})"

    def get_full_name(self):
        """Return the user's full name, falling back to first/last name, then email."""
        if self.full_name:
            return self.full_name
        full_name = super().get_full_name()
        return full_name if full_name else self.email

    @property
    def is_farm_admin(self):
        return self.is_superuser or self.role == self.UserRole.ADMIN

    @property
    def is_farm_staff(self):
        return self.is_farm_admin or self.role == self.UserRole.EMPLOYEE
