"""Bounded-depth walk of a repository's contents tree.

Directories are descended depth-first through the contents API,
file bodies are downloaded only for names matched by
:func:`~repo_insight.services.file_rules.should_fetch_content`, and the facts
are accumulated into a :class:`ProjectStructure`.  A failure in one subtree or
one file never aborts the walk.
"""

from __future__ import annotations

import logging

from repo_insight.domain.entities import ContentItem, EntryKind, FileEntry, ProjectStructure
from repo_insight.domain.events import EventKind, EventSink, TraversalEvent
from repo_insight.domain.exceptions import ContentFetchError, ManifestParseError, UpstreamError
from repo_insight.domain.ports.repo_source import RepoSource
from repo_insight.services.file_rules import (
    file_extension,
    is_config_file,
    is_manifest,
    is_readme,
    should_fetch_content,
)
from repo_insight.services.manifest_parser import parse_package_json

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3


class TreeTraverser:
    """Walks one repository and fills a :class:`ProjectStructure`."""

    def __init__(self, source: RepoSource, on_event: EventSink | None = None) -> None:
        self._source = source
        self._on_event = on_event

    async def build_structure(
        self, owner: str, repo: str, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> ProjectStructure:
        """Traverse from the root into a fresh snapshot."""
        structure = ProjectStructure()
        await self.traverse(owner, repo, structure, max_depth=max_depth)
        logger.info(
            "Traversed %s/%s: %d files, %d directories",
            owner, repo, len(structure.files), len(structure.directories),
        )
        return structure

    async def traverse(
        self,
        owner: str,
        repo: str,
        structure: ProjectStructure,
        path: str = "",
        max_depth: int = DEFAULT_MAX_DEPTH,
        current_depth: int = 0,
    ) -> None:
        """Accumulate everything below *path* into *structure*."""
        if current_depth > max_depth:
            return

        try:
            items = await self._source.list_contents(owner, repo, path)
        except UpstreamError as exc:
            location = f"{owner}/{repo}/{path}" if path else f"{owner}/{repo}"
            logger.warning("Error traversing %s: %s", location, exc)
            self._emit(EventKind.SUBTREE_FAILED, owner, repo, path, str(exc))
            return

        for item in items:
            if item.kind is EntryKind.DIR:
                structure.directories.append(item.path)
                await self.traverse(
                    owner, repo, structure, item.path, max_depth, current_depth + 1
                )
            else:
                await self._visit_file(owner, repo, item, structure)

    async def _visit_file(
        self, owner: str, repo: str, item: ContentItem, structure: ProjectStructure
    ) -> None:
        entry = FileEntry(
            name=item.name,
            path=item.path,
            sha=item.sha,
            size=item.size,
            url=item.url,
        )

        if should_fetch_content(item.name):
            try:
                entry.content, entry.encoding = await self._source.fetch_file_content(
                    owner, repo, item.path
                )
            except ContentFetchError as exc:
                logger.warning("Error fetching content for %s: %s", item.path, exc)
                self._emit(EventKind.CONTENT_FETCH_FAILED, owner, repo, item.path, str(exc))

        structure.files.append(entry)

        if is_manifest(item.name) and entry.content is not None:
            try:
                structure.manifests.append(parse_package_json(item.path, entry.content))
            except ManifestParseError as exc:
                logger.debug("Skipping manifest %s: %s", item.path, exc)
                self._emit(EventKind.MANIFEST_PARSE_FAILED, owner, repo, item.path, str(exc))

        if is_readme(item.name):
            structure.readmes.append(entry)

        if is_config_file(item.name):
            structure.configs.append(entry)

        extension = file_extension(item.name)
        if extension:
            structure.languages[extension] = structure.languages.get(extension, 0) + 1

    def _emit(self, kind: EventKind, owner: str, repo: str, path: str, message: str) -> None:
        if self._on_event is not None:
            self._on_event(
                TraversalEvent(kind=kind, owner=owner, repo=repo, path=path, message=message)
            )
