"""Message: a top-level entity that can also be nested as a message/rfc822 body."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import TYPE_CHECKING, BinaryIO

from . import fields
from .body import Body
from .entity import Entity
from .field import DateTimeField, UnstructuredField

if TYPE_CHECKING:
    from .config import MimeConfig
    from .storage import StorageProvider


class Message(Entity, Body):
    """A MIME message.

    The ``get_*`` accessors only read: they return None without creating a
    header when there is none.  The ``set_*``/``create_*`` mutators always
    make sure a header exists before changing it.

    Parse a message from bytes or a binary stream::

        msg = Message.parse(open("mail.eml", "rb"))
    """

    @classmethod
    def parse(
        cls,
        source: bytes | BinaryIO,
        config: MimeConfig | None = None,
        storage_provider: StorageProvider | None = None,
    ) -> Message:
        """Parse *source* into a new message.

        Body content is stored through *storage_provider*, or the provider
        selected by ``config.storage`` when none is given.
        """
        from .builder import MessageBuilder
        from .config import MimeConfig
        from .parser import MimeStreamParser
        from .storage import create_storage_provider

        config = config or MimeConfig()
        if storage_provider is None:
            storage_provider = create_storage_provider(config.storage)

        message = cls()
        builder = MessageBuilder(message, storage_provider, config.parser)
        try:
            MimeStreamParser(config.parser).parse(source, builder)
        except Exception:
            message.dispose()
            raise
        return message

    def get_message_id(self) -> str | None:
        """The Message-ID field body, or None if absent."""
        field = self._get_field(fields.MESSAGE_ID)
        if field is None:
            return None
        return field.body

    def create_message_id(self, hostname: str | None = None) -> None:
        """Set a freshly generated Message-ID.

        *hostname* becomes the right-hand side of the identifier; without it
        ``localhost`` is used.  Uniqueness across messages is not checked.
        """
        self.ensure_header().set_field(fields.message_id(hostname))

    def get_subject(self) -> str | None:
        """The decoded Subject, or None if absent."""
        field = self._get_field(fields.SUBJECT)
        if field is None:
            return None
        if isinstance(field, UnstructuredField):
            return field.value
        return field.body

    def set_subject(self, subject: str | None) -> None:
        """Set the Subject (encoded-words for non-ASCII); None removes it."""
        header = self.ensure_header()
        if subject is None:
            header.remove_fields(fields.SUBJECT)
        else:
            header.set_field(fields.subject(subject))

    def get_date(self) -> datetime | None:
        """The Date as a datetime, or None if absent or unparsable."""
        field = self._get_field(fields.DATE)
        if not isinstance(field, DateTimeField):
            return None
        return field.date

    def set_date(self, date: datetime | None, zone: tzinfo | None = None) -> None:
        """Set the Date formatted in *zone* (the host's zone if None); None removes it.

        Precision is one second.  A naive *date* is read as host local time,
        so :meth:`get_date` returns it as an aware datetime.
        """
        header = self.ensure_header()
        if date is None:
            header.remove_fields(fields.DATE)
        else:
            header.set_field(fields.date(date, zone))
