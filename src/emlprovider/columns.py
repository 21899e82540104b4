"""Column names of the messages collection."""

MESSAGES_TABLE = "messages"

# Generic list code binds to this name; the store uses "id".
ID_ALIAS = "_id"


class MessageColumns:
    ID = "id"
    UID = "uid"
    INTERNAL_DATE = "internal_date"
    SUBJECT = "subject"
    DATE = "date"
    MESSAGE_ID = "message_id"
    SENDER_LIST = "sender_list"
    TO_LIST = "to_list"
    CC_LIST = "cc_list"
    BCC_LIST = "bcc_list"
    REPLY_TO_LIST = "reply_to_list"
    FLAGS = "flags"
    ATTACHMENT_COUNT = "attachment_count"
    FOLDER_ID = "folder_id"
    PREVIEW = "preview"
    THREAD_ROOT = "thread_root"
    THREAD_PARENT = "thread_parent"


class InternalMessageColumns(MessageColumns):
    """Columns used by the store and the implicit filter, never exposed."""
    DELETED = "deleted"
    EMPTY = "empty"
    TEXT_CONTENT = "text_content"
    HTML_CONTENT = "html_content"
    MIME_TYPE = "mime_type"


PUBLIC_COLUMNS: tuple[str, ...] = (
    MessageColumns.ID,
    MessageColumns.UID,
    MessageColumns.INTERNAL_DATE,
    MessageColumns.SUBJECT,
    MessageColumns.DATE,
    MessageColumns.MESSAGE_ID,
    MessageColumns.SENDER_LIST,
    MessageColumns.TO_LIST,
    MessageColumns.CC_LIST,
    MessageColumns.BCC_LIST,
    MessageColumns.REPLY_TO_LIST,
    MessageColumns.FLAGS,
    MessageColumns.ATTACHMENT_COUNT,
    MessageColumns.FOLDER_ID,
    MessageColumns.PREVIEW,
    MessageColumns.THREAD_ROOT,
    MessageColumns.THREAD_PARENT,
)

