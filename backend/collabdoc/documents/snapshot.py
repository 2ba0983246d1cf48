"""Empty collaboration snapshot.

A freshly created document has no stored state. The editor still expects the
shared ``data`` map with its two rich-text fragments, so a fetch of an empty
document answers with an update that creates them.
"""

from pycrdt import Doc, Map, XmlFragment

ROOT_MAP_NAME = "data"
EDITOR_FRAGMENTS = ("editor", "editorSecond")


def empty_document_snapshot() -> bytes:
    """Encode the initial state of a document as a Yjs update."""
    doc = Doc()
    doc[ROOT_MAP_NAME] = data = Map()
    for fragment in EDITOR_FRAGMENTS:
        data[fragment] = XmlFragment()
    return doc.get_update()
