# shared/common/mixins.py
"""
Reusable Mixins for Models and Views
"""

import uuid
from typing import Any, Dict

from django.db import models


# =============================================================================
# MODEL MIXINS
# =============================================================================

class UUIDPrimaryKeyMixin(models.Model):
    """
    Mixin that uses a UUID primary key so ids can be handed to other
    services without exposing row counts.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record"
    )

    class Meta:
        abstract = True


class TimestampMixin(models.Model):
    """
    Mixin that provides created_at and updated_at timestamp fields.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When this record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When this record was last updated"
    )

    class Meta:
        abstract = True


# =============================================================================
# VIEW MIXINS
# =============================================================================

class MultiSerializerMixin:
    """
    Mixin that picks a serializer per viewset action, falling back to
    ``serializer_class``.
    """

    serializer_classes: Dict[str, Any] = {}

    def get_serializer_class(self):
        action = getattr(self, 'action', None)
        return self.serializer_classes.get(action, self.serializer_class)
