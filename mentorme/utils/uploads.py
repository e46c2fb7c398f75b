"""Document upload helper.

Writes uploaded files (werkzeug ``FileStorage`` objects) into the configured
upload directory and returns unsaved ``Document`` rows in upload order. The
caller attaches them to a program and persists everything in one transaction.
"""
import logging
import os
import uuid

from werkzeug.utils import secure_filename

from mentorme.core.exceptions import MentorMeError
from mentorme.models.program import Document

logger = logging.getLogger(__name__)


def _stored_name(filename):
    safe = secure_filename(filename) or "document"
    return f"{uuid.uuid4().hex}_{safe}"


def upload_documents(directory, files):
    """Store every uploaded file under ``directory``.

    Parts without a filename (an empty ``<input type="file">``) are skipped.

    Returns:
        list[Document] in the order the files were given.

    Raises:
        MentorMeError: a file could not be written. Files already written
            by this call are removed before raising.
    """
    documents = []
    written = []
    for upload in files or ():
        if upload is None or not upload.filename:
            continue
        path = os.path.join(directory, _stored_name(upload.filename))
        try:
            upload.save(path)
            written.append(path)
            size = os.path.getsize(path)
        except OSError as exc:
            logger.error("Failed to store upload %r: %s", upload.filename, exc)
            for done in written:
                try:
                    os.remove(done)
                except OSError:
                    logger.warning("Could not remove partial upload %s", done)
            raise MentorMeError(f"Could not store document '{upload.filename}'") from exc

        documents.append(Document(
            name=upload.filename,
            path=path,
            content_type=upload.mimetype or None,
            size_bytes=size,
            position=len(documents),
        ))

    if documents:
        logger.info("Stored %d document(s) in %s", len(documents), directory,
                    extra={"document_count": len(documents)})
    return documents
