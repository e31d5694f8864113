import copy
import uuid
from typing import Any, Dict, Iterable, List, Tuple

Filter = Tuple[str, str, Any]

_OPERATORS = {
    "==": lambda left, right: left == right,
    "!=": lambda left, right: left != right,
}


class DocumentStore:
    """In-memory keyed collections of JSON-like documents.

    Documents are deep-copied on the way in and out, so callers never share
    a mutable reference with the store.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def add(self, collection: str, data: Dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self.set(collection, doc_id, data)
        return doc_id

    def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        document = copy.deepcopy(data)
        document.pop("id", None)
        self._collection(collection)[doc_id] = document

    def get(self, collection: str, doc_id: str) -> Dict[str, Any] | None:
        document = self._collection(collection).get(doc_id)
        if document is None:
            return None
        return {"id": doc_id, **copy.deepcopy(document)}

    def exists(self, collection: str, doc_id: str) -> bool:
        return doc_id in self._collection(collection)

    def delete(self, collection: str, doc_id: str) -> None:
        self._collection(collection).pop(doc_id, None)

    def query(
        self,
        collection: str,
        filters: Iterable[Filter] = (),
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> List[Dict[str, Any]]:
        checks = []
        for field, op, value in filters:
            if op not in _OPERATORS:
                raise ValueError(f"Unsupported query operator: {op}")
            checks.append((field, _OPERATORS[op], value))

        matches = [
            (doc_id, document)
            for doc_id, document in self._collection(collection).items()
            if all(field in document and compare(document[field], value) for field, compare, value in checks)
        ]

        if order_by is not None:
            matches = [item for item in matches if item[1].get(order_by) is not None]
            if descending:
                # newest insert first among equal keys
                matches.reverse()
            matches.sort(key=lambda item: item[1][order_by], reverse=descending)

        if limit is not None:
            matches = matches[:limit]

        return [{"id": doc_id, **copy.deepcopy(document)} for doc_id, document in matches]
