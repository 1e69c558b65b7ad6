"""Document stager — keeps Requirements and StagedDocuments consistent.

Requirements are what the applicant sees; StagedDocuments are the encoded
files waiting to ride along with the final submission.  Encodings run as
independent asyncio tasks; each completion is applied as one append on the
event loop, and a late result whose requirement was deleted or re-attached
in the meantime is dropped.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from wizard.errors import StagingError, ValidationError
from wizard.state import (
    DocumentStatus,
    Requirement,
    RequirementStatus,
    SourceFile,
    StagedDocument,
    initial_requirements,
    new_id,
)
from workers.file_encoder import encode_file, to_data_uri

logger = logging.getLogger(__name__)

EDITABLE_REQUIREMENT_FIELDS = ("type", "description")


class DocumentStager:

    def __init__(self, user_id: str = "current-user", business_ref: Callable[[], str] = lambda: "temp"):
        self.user_id = user_id
        self._business_ref = business_ref
        self.requirements: List[Requirement] = initial_requirements()
        self.documents: List[StagedDocument] = []
        self.errors: List[StagingError] = []
        self._pending: Dict[str, asyncio.Task] = {}   # file_ref → encoding task

    # ── Lookups ─────────────────────────────────────────────────────────

    def get_requirement(self, requirement_id: str) -> Optional[Requirement]:
        return next((r for r in self.requirements if r.id == requirement_id), None)

    def documents_for(self, requirement_id: str) -> List[StagedDocument]:
        return [d for d in self.documents if d.requirement_id == requirement_id]

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _replace(self, updated: Requirement) -> None:
        self.requirements = [updated if r.id == updated.id else r for r in self.requirements]

    def _drop_documents(self, requirement_id: str) -> None:
        self.documents = [d for d in self.documents if d.requirement_id != requirement_id]

    # ── Mutations ───────────────────────────────────────────────────────

    def add_requirement(self, req_type: str, description: str, file: Optional[SourceFile]) -> Requirement:
        """
        Append a requirement and start encoding its file in the background.
        Must be called from a running event loop.  Nothing is added if any
        input is missing.
        """
        errors = {}
        if not (req_type or "").strip():
            errors["type"] = "Requirement type is required"
        if not (description or "").strip():
            errors["description"] = "Requirement description is required"
        if file is None or not file.name:
            errors["file"] = "A file is required"
        if errors:
            raise ValidationError(errors)

        requirement = Requirement(
            id=new_id(),
            type=req_type.strip(),
            description=description.strip(),
            file_name=file.name,
            file_ref=new_id("temp-"),
            source=file,
        )
        self.requirements.append(requirement)
        self._schedule(requirement)
        logger.info(f"Requirement added: {requirement.type} ({file.name})")
        return requirement

    def attach_file(self, requirement_id: str, file: SourceFile) -> Optional[Requirement]:
        """Attach (or replace, or retry) the file of an existing requirement."""
        requirement = self.get_requirement(requirement_id)
        if requirement is None:
            return None
        if file is None or not file.name:
            raise ValidationError({"file": "A file is required"})

        self._drop_documents(requirement_id)
        updated = requirement.model_copy(update={
            "file_name": file.name,
            "file_ref": new_id("temp-"),
            "source": file,
            "status": RequirementStatus.PENDING_UPLOAD,
            "path": None,
        })
        self._replace(updated)
        self._schedule(updated)
        return updated

    def update_requirement(self, requirement_id: str, patch: Dict[str, Any]) -> Optional[Requirement]:
        """Edit type/description in place. Documents are left as they are."""
        rejected = {k: f"'{k}' cannot be edited" for k in patch if k not in EDITABLE_REQUIREMENT_FIELDS}
        if rejected:
            raise ValidationError(rejected)

        requirement = self.get_requirement(requirement_id)
        if requirement is None:
            return None
        updated = requirement.model_copy(update=dict(patch))
        self._replace(updated)
        return updated

    def delete_requirement(self, requirement_id: str) -> bool:
        """Remove a requirement together with its staged document."""
        if self.get_requirement(requirement_id) is None:
            return False
        self.requirements = [r for r in self.requirements if r.id != requirement_id]
        self._drop_documents(requirement_id)
        return True

    def hydrate(self, requirements: List[Requirement], documents: List[StagedDocument]) -> None:
        """Load requirements/documents of an existing business (edit mode)."""
        self.requirements = list(requirements) or initial_requirements()
        self.documents = list(documents)
        self.errors = []
        self._pending = {}

    def reset(self) -> None:
        """Back to the default checklist; in-flight encodings will be discarded."""
        self.requirements = initial_requirements()
        self.documents = []
        self.errors = []
        self._pending = {}

    # ── Encoding ────────────────────────────────────────────────────────

    def _schedule(self, requirement: Requirement) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._encode_and_stage(requirement.id, requirement.file_ref, requirement.source),
            name=f"encode-{requirement.file_ref}",
        )
        self._pending[requirement.file_ref] = task

    def _is_current(self, requirement_id: str, doc_id: str) -> Optional[Requirement]:
        requirement = self.get_requirement(requirement_id)
        if requirement is None or requirement.file_ref != doc_id:
            return None
        return requirement

    async def _encode_and_stage(self, requirement_id: str, doc_id: str, source: SourceFile) -> Optional[StagingError]:
        try:
            try:
                encoded = await encode_file(source)
            except (OSError, ValueError) as e:
                return self._record_failure(requirement_id, doc_id, source, e)

            requirement = self._is_current(requirement_id, doc_id)
            if requirement is None:
                logger.debug(f"Discarding stale encoding for {source.name}")
                return None

            document = StagedDocument(
                id=doc_id,
                requirement_id=requirement_id,
                type=requirement.type,
                description=requirement.description,
                business_ref=self._business_ref() or "temp",
                user_id=self.user_id,
                filename=encoded.filename,
                encoded_payload=encoded.data,
                file_type=encoded.file_type,
                status=DocumentStatus.PENDING,
            )
            self.documents = [d for d in self.documents if d.requirement_id != requirement_id] + [document]
            logger.info(f"Staged {encoded.filename} ({encoded.size} bytes)")
            return None
        finally:
            self._pending.pop(doc_id, None)

    def _record_failure(self, requirement_id: str, doc_id: str, source: SourceFile, exc: Exception) -> Optional[StagingError]:
        error = StagingError(
            f"Could not prepare '{source.name}' for upload: {exc}",
            requirement_id=requirement_id,
            filename=source.name,
        )
        requirement = self._is_current(requirement_id, doc_id)
        if requirement is None:
            logger.debug(f"Ignoring failed encoding of replaced file {source.name}")
            return None
        self._replace(requirement.model_copy(update={"status": RequirementStatus.FAILED}))
        self.errors.append(error)
        logger.warning(str(error))
        return error

    async def settle(self) -> List[StagingError]:
        """Wait until every in-flight encoding has finished, successfully or not."""
        failures: List[StagingError] = []
        while self._pending:
            results = await asyncio.gather(*list(self._pending.values()))
            failures.extend(r for r in results if isinstance(r, StagingError))
        return failures

    def consume_errors(self) -> List[StagingError]:
        errors, self.errors = self.errors, []
        return errors

    # ── Viewing / payload ───────────────────────────────────────────────

    async def view_document(self, target: Union[Requirement, StagedDocument]) -> Optional[str]:
        """
        Resolve a requirement or document into something a browser can open:
        a data: URI for locally held files, or the stored path for files the
        registry already has.  None when there is nothing to show.
        """
        if isinstance(target, Requirement):
            docs = self.documents_for(target.id) or [
                d for d in self.documents
                if d.requirement_id is None and target.file_name and d.filename == target.file_name
            ]
            if docs:
                return await self.view_document(docs[0])
            if target.source is not None:
                try:
                    encoded = await encode_file(target.source)
                    return to_data_uri(encoded.data, encoded.file_type)
                except (OSError, ValueError) as e:
                    logger.warning(f"Local file for requirement {target.id} is unreadable: {e}")
            if target.path:
                return target.path
        else:
            if target.encoded_payload:
                return to_data_uri(target.encoded_payload, target.file_type or "application/octet-stream")
            if target.path:
                return target.path

        logger.warning(f"No file available for this document ({target.id})")
        return None

    def documents_payload(self, business_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return [d.to_payload(business_id) for d in self.documents]

    def requirements_payload(self) -> List[Dict[str, Any]]:
        return [r.to_payload() for r in self.requirements]

    def snapshot(self) -> Dict[str, Any]:
        return {
            "requirements": [r.model_dump(mode="json") for r in self.requirements],
            "documents": [d.model_dump(mode="json", exclude={"encoded_payload"}) for d in self.documents],
            "pending_encodings": self.pending_count,
            "staging_errors": [str(e) for e in self.errors],
        }
