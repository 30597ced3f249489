# flowlint/credentials.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from flowlint.errors import CredentialStoreError
from flowlint.registry.model import NodeTypeSchema, display_matches
from flowlint.result import FalsePositive, Issue, IssueCode, Severity
from flowlint.utils.io import load_any
from flowlint.utils.logger import get_logger

logger = get_logger("credentials")


@dataclass(frozen=True)
class StoredCredential:
    id: str
    name: str
    type: str


class CredentialStore:
    """
    Read-only view of the credentials that exist on the target n8n instance,
    loaded from an export: [{"id", "name", "type"}, ...] or {"credentials": [...]}.
    Secrets are never part of the export and never read.
    """

    def __init__(self, credentials: Optional[Iterable[StoredCredential]] = None):
        self._by_id: Dict[str, StoredCredential] = {}
        self._by_name: Dict[str, StoredCredential] = {}
        for c in credentials or []:
            self._by_id[c.id] = c
            self._by_name.setdefault(c.name, c)

    def get(self, cred_id: Any) -> Optional[StoredCredential]:
        if cred_id is None:
            return None
        return self._by_id.get(str(cred_id))

    def by_name(self, name: Any) -> Optional[StoredCredential]:
        if not name:
            return None
        return self._by_name.get(str(name))

    def __len__(self) -> int:
        return len(self._by_id)

    @classmethod
    def from_dicts(cls, items: Iterable[Dict[str, Any]]) -> "CredentialStore":
        creds = []
        for d in items:
            if not isinstance(d, dict) or d.get("id") is None or not d.get("type"):
                raise CredentialStoreError(f"Credential entry needs 'id' and 'type': {d!r}")
            creds.append(StoredCredential(id=str(d["id"]), name=str(d.get("name", "")), type=str(d["type"])))
        return cls(creds)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CredentialStore":
        try:
            data = load_any(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise CredentialStoreError(f"Cannot read credential export {path}: {e}") from e
        if isinstance(data, dict):
            data = data.get("credentials", data.get("data"))
        if not isinstance(data, list):
            raise CredentialStoreError(f"{path}: expected a list of credentials or {{'credentials': [...]}}")
        store = cls.from_dicts(data)
        logger.info("Loaded %d credentials from %s", len(store), path)
        return store


def check_credentials(
    node: Dict[str, Any],
    schema: NodeTypeSchema,
    store: Optional[CredentialStore] = None,
    environment: str = "production",
) -> List[Issue]:
    """
    Check a node's credential references.

    Without a store only the reference *types* are checked against what the node
    accepts. Outside production every finding is downgraded to a warning, since
    development instances routinely lack the production credentials.
    """
    nname = str(node.get("name") or node.get("id") or "<unnamed>")
    params = node.get("parameters") or {}
    if not isinstance(params, dict):
        params = {}
    refs = node.get("credentials") or {}
    production = environment == "production"

    def _issue(code: IssueCode, message: str, **kwargs) -> Issue:
        if production:
            return Issue(code, Severity.ERROR, message, node=nname, **kwargs)
        return Issue(code, Severity.WARNING, message, node=nname,
                     false_positive=FalsePositive.DEV_CREDENTIALS, **kwargs)

    if not isinstance(refs, dict):
        return [_issue(IssueCode.CREDENTIAL_MISMATCH,
                       f"Node '{nname}' credentials must be an object keyed by credential type",
                       path="credentials")]

    accepted = set(schema.credential_names())
    # HTTP-style nodes choose the credential type through a parameter
    for key in ("nodeCredentialType", "genericAuthType"):
        if isinstance(params.get(key), str) and params[key]:
            accepted.add(params[key])

    issues: List[Issue] = []
    for cred_type, ref in refs.items():
        path = f"credentials.{cred_type}"
        if cred_type not in accepted:
            issues.append(_issue(
                IssueCode.CREDENTIAL_MISMATCH,
                f"Node '{nname}' references credential type '{cred_type}', "
                f"which type '{schema.name}' does not accept",
                path=path,
                fix=("use one of " + ", ".join(sorted(accepted))) if accepted else "remove the credential",
            ))
            continue
        if store is None:
            continue

        ref = ref if isinstance(ref, dict) else {"id": ref}
        stored = store.get(ref.get("id")) or (store.by_name(ref.get("name")) if ref.get("id") is None else None)
        label = ref.get("id") if ref.get("id") is not None else ref.get("name")
        if stored is None:
            issues.append(_issue(
                IssueCode.CREDENTIAL_MISMATCH,
                f"Node '{nname}' references credential '{label}' ({cred_type}), which does not exist",
                path=path, fix="create the credential or pick an existing one",
            ))
        elif stored.type != cred_type:
            issues.append(_issue(
                IssueCode.CREDENTIAL_MISMATCH,
                f"Node '{nname}' uses credential '{label}' as '{cred_type}', "
                f"but it is a '{stored.type}' credential",
                path=path,
            ))

    version = node.get("typeVersion")
    required = [
        c for c in schema.credentials
        if c.required and display_matches(c.display_options, params, schema, version)
    ]
    if required and not any(c.name in refs for c in required):
        names = ", ".join(c.name for c in required)
        issues.append(_issue(
            IssueCode.MISSING_CREDENTIAL,
            f"Node '{nname}' requires a credential ({names})",
            path="credentials", fix=f"attach a {required[0].name} credential",
        ))
    return issues
