class CrmDocumentsError(Exception):
    """Base class for errors raised by crm_documents."""


class UnsupportedDocumentType(CrmDocumentsError):
    def __init__(self, doc_type: object):
        super().__init__(f"Unsupported document type: {doc_type!r}. Use 'invoice', 'quote' or 'order'")
        self.doc_type = doc_type


class DocumentNotFound(CrmDocumentsError):
    def __init__(self, doc_type: str, doc_id: object):
        super().__init__(f"No {doc_type} found with ID: {doc_id}")
        self.doc_type = doc_type
        self.doc_id = doc_id


class AssetFetchError(CrmDocumentsError):
    """Logo, QR image or font bytes could not be downloaded."""


class FontEmbedError(CrmDocumentsError):
    """The drawing backend cannot use the supplied font bytes."""


class ImageEmbedError(CrmDocumentsError):
    """The drawing backend cannot decode the supplied image bytes."""
