"""Export component datasets as JSON or CSV, and collect open data."""

import csv
import io
import json
import logging
from typing import Any, Dict, List

from participa.core.component_system import registry as default_registry
from participa.db.models import Component, ParticipatorySpace

logger = logging.getLogger(__name__)


def flatten(row: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested dicts into 'parent/child' columns."""
    flat = {}
    for key, value in row.items():
        column = f"{prefix}/{key}" if prefix else str(key)
        if isinstance(value, dict):
            flat.update(flatten(value, column))
        elif isinstance(value, (list, tuple)):
            flat[column] = ",".join(str(v) for v in value)
        else:
            flat[column] = value
    return flat


class ExportService:
    """Run the exports declared by component manifests."""

    def __init__(self, session, component_registry=None):
        self.session = session
        self.registry = component_registry or default_registry

    def _export_manifest(self, component: Component, export_name: str):
        manifest = self.registry.get(component.manifest_name)
        if manifest is None:
            raise ValueError(f"No manifest registered for {component.manifest_name}")
        for export in manifest.get_exports():
            if export.name == export_name:
                return export
        raise ValueError(f"Component {component.manifest_name} has no export '{export_name}'")

    def rows(self, component: Component, export_name: str) -> List[Dict[str, Any]]:
        """Serialized rows of one export."""
        export = self._export_manifest(component, export_name)
        return export.serialize(export.fetch(self.session, component))

    def export(self, component: Component, export_name: str, format: str = "json") -> bytes:
        """
        Export a component dataset.

        Args:
            component: Component instance to export from
            export_name: Name of the declared export (e.g. 'results')
            format: 'json' or 'csv'

        Returns:
            Encoded file contents
        """
        export = self._export_manifest(component, export_name)
        if format not in export.formats:
            raise ValueError(f"Unsupported export format: {format}")

        rows = export.serialize(export.fetch(self.session, component))
        logger.info(f"Exporting {len(rows)} rows of {export_name} from component {component.id} as {format}")

        if format == "json":
            return json.dumps(rows, ensure_ascii=False, indent=2).encode("utf-8")

        flat_rows = [flatten(row) for row in rows]
        columns = []
        for row in flat_rows:
            for column in row:
                if column not in columns:
                    columns.append(column)

        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=columns, delimiter=";")
        writer.writeheader()
        writer.writerows(flat_rows)
        return buffer.getvalue().encode("utf-8")

    def open_data(self, organization) -> Dict[str, List[Dict[str, Any]]]:
        """Collect every open-data export of the organization's published components."""
        components = (
            self.session.query(Component)
            .join(ParticipatorySpace)
            .filter(
                ParticipatorySpace.organization_id == organization.id,
                Component.published_at.isnot(None),
            )
            .order_by(Component.id)
            .all()
        )

        data = {}
        for component in components:
            manifest = self.registry.get(component.manifest_name)
            if manifest is None or not manifest.enabled:
                continue
            for export in manifest.get_exports():
                if not export.include_in_open_data:
                    continue
                key = f"{component.participatory_space.slug}-{component.id}-{export.name}"
                data[key] = export.serialize(export.fetch(self.session, component))
        return data
