"""
Document loading and root entry lookup.

An animation graph document is a JSON tree whose node-init collection lives
at Data.RootChunk.nodesToInit. The first element of that collection is the
root entry the extractor walks from; it must carry a "Data" payload.

Document shape (abridged):

    {
      "Data": {
        "RootChunk": {
          "nodesToInit": [
            {"HandleId": "0", "Data": {"$type": "animAnimNode_Output", ...}},
            ...
          ]
        }
      }
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from animgraph.constants import FIELD_PAYLOAD, ROOT_PATH
from animgraph.exceptions import InvalidDocument

logger = logging.getLogger(__name__)


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Parse a graph JSON document from disk.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed document.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidDocument: If the file is not valid JSON.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            document = json.load(fh)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidDocument(f"Could not parse {path}: {e}") from e
    logger.info(f"Loaded document {path}")
    return document


def get_root_collection(document: Any) -> List[Any]:
    """
    Return the node-init collection of a document.

    Raises:
        InvalidDocument: If the collection is missing, not a list, or empty.
    """
    node = document
    for key in ROOT_PATH:
        if not isinstance(node, dict) or key not in node:
            raise InvalidDocument(
                f"Invalid graph document: '{'.'.join(ROOT_PATH)}' not found"
            )
        node = node[key]

    if not isinstance(node, list):
        raise InvalidDocument(
            f"Invalid graph document: '{ROOT_PATH[-1]}' is {type(node).__name__}, expected list"
        )
    if not node:
        raise InvalidDocument(f"Invalid graph document: '{ROOT_PATH[-1]}' is empty")
    return node


def get_root_entry(document: Any) -> Dict[str, Any]:
    """
    Return the designated root entry: the first node-init element.

    Raises:
        InvalidDocument: If the root entry has no "Data" payload object.
    """
    entry = get_root_collection(document)[0]
    if not isinstance(entry, dict) or not isinstance(entry.get(FIELD_PAYLOAD), dict):
        raise InvalidDocument(
            f"Invalid graph document: root entry has no '{FIELD_PAYLOAD}' payload"
        )
    return entry
