from django.db import models
import uuid


class Manager(models.Model):
    """Person who manages one or more pubs through the pub-manager portal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=100, blank=True)
    pubs = models.ManyToManyField('pubs.Pub', through='PubManager', related_name='managers', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'managers'
        ordering = ['-created_at']

    def __str__(self):
        return self.email


class PubManager(models.Model):
    """Link between a manager and a pub they may edit."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    manager = models.ForeignKey(Manager, on_delete=models.CASCADE, related_name='pub_links')
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, related_name='manager_links')
    role = models.CharField(max_length=20, default='owner')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'pub_managers'
        unique_together = [['manager', 'pub']]

    def __str__(self):
        return f"{self.manager.email} -> {self.pub.name} ({self.role})"


class ManagerLogin(models.Model):
    """One successful portal login."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    manager = models.ForeignKey(Manager, on_delete=models.SET_NULL, null=True, blank=True, related_name='logins')
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, related_name='manager_logins')
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'manager_logins'
        ordering = ['-created_at']


class PubRequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    REVIEWED = 'reviewed', 'Reviewed'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class PubRequest(models.Model):
    """
    Request from the public to list a pub, or a change request from a manager.

    Manager change requests keep their type, subject and description in
    ``notes``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pub_name = models.CharField(max_length=255)
    postcode = models.CharField(max_length=20, blank=True)
    manager_name = models.CharField(max_length=255)
    contact_email = models.EmailField()
    contact_phone = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=20, choices=PubRequestStatus.choices, default=PubRequestStatus.PENDING)
    notes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pub_requests'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.pub_name} ({self.status})"


class ConnectionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class PubManagerConnectionRequest(models.Model):
    """Manager asking to be linked to another pub."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField()
    pub = models.ForeignKey('pubs.Pub', on_delete=models.CASCADE, related_name='connection_requests')
    status = models.CharField(max_length=20, choices=ConnectionStatus.choices, default=ConnectionStatus.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pub_manager_connection_requests'
        unique_together = [['email', 'pub']]
        ordering = ['status', '-created_at']

    def __str__(self):
        return f"{self.email} -> {self.pub.name} ({self.status})"


class PubManagerNewsletter(models.Model):
    """Monthly insights sign-up, one per pub."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    pub = models.OneToOneField('pubs.Pub', on_delete=models.CASCADE, related_name='newsletter_signup')
    pub_name = models.CharField(max_length=255)
    email = models.EmailField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pub_manager_newsletter'

    def __str__(self):
        return f"{self.pub_name} <{self.email}>"
