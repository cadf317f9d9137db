"""
Report Exporter Module

This module serializes an AnalysisResult into downloadable artifacts:
- JSON: the canonical save format with repository, languages, contributors
  and commit activity
- CSV: contributor logins and contribution counts

Export is a pure transformation into an ExportArtifact; writing the artifact
to disk is a separate, optional step.
"""

import csv
import io
import json
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from console import logger
from models import AnalysisResult, ExportArtifact
from utilities import safe_filename

FALLBACK_NAME = "repo"

EXPORT_FORMATS = {
    "json": ("git-analyzer.json", "application/json"),
    "csv": ("contributors.csv", "text/csv"),
}


class DateEncoder(json.JSONEncoder):
    """JSON encoder writing dates as YYYY-MM-DD and datetimes in ISO 8601"""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (date, datetime)):
            return obj.isoformat()
        return super().default(obj)


class ReportExporter:
    """Serializes analysis results into JSON or CSV artifacts"""

    @staticmethod
    def artifact_basename(result: Optional[AnalysisResult]) -> str:
        """
        Base file name for a result: the canonical owner/name made file-safe.

        Prefers the name reported by the API (canonical casing) over the
        name the user typed.
        """
        full_name = None
        if result is not None:
            if result.metadata is not None and result.metadata.full_name:
                full_name = result.metadata.full_name
            elif result.ref is not None:
                full_name = result.ref.full_name
        if not full_name:
            return FALLBACK_NAME
        return safe_filename(full_name, FALLBACK_NAME)

    @staticmethod
    def build_report(result: AnalysisResult) -> Dict[str, Any]:
        """Assemble the JSON report structure in its fixed key order"""
        metadata = result.metadata
        if metadata.raw:
            repo = metadata.raw
        else:
            repo = {key: value for key, value in asdict(metadata).items() if key != "raw"}

        return {
            "repo": repo,
            "languages": [
                {"name": entry.name, "bytes": entry.bytes, "percentage": entry.percentage}
                for entry in result.languages
            ],
            "contributors": [
                {"login": contributor.identity, "contributions": contributor.contributions}
                for contributor in result.contributors
            ],
            "commits": [
                {"day": point.day, "count": point.count}
                for point in result.commits
            ],
        }

    def to_json(self, result: AnalysisResult) -> str:
        return json.dumps(self.build_report(result), cls=DateEncoder, indent=2, ensure_ascii=False)

    @staticmethod
    def to_csv(result: AnalysisResult) -> str:
        """
        Contributors as ``login,contributions`` lines, one record per line.

        Identities containing commas, quotes or line breaks are quoted
        following RFC 4180; all other lines are written verbatim.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
        writer.writerow(["login", "contributions"])
        for contributor in result.contributors:
            identity = contributor.identity.strip() if contributor.identity else ""
            writer.writerow([identity or "anon", contributor.contributions or 0])
        return buffer.getvalue()

    def export(self, result: AnalysisResult, fmt: str) -> ExportArtifact:
        """
        Serialize a result in the requested format.

        Args:
            result: Result of a successful analysis run
            fmt: ``json`` or ``csv``

        Returns:
            ExportArtifact with the file name, media type and UTF-8 payload

        Raises:
            ValueError: If the format is not supported
        """
        fmt = fmt.lower()
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})")

        suffix, media_type = EXPORT_FORMATS[fmt]
        text = self.to_json(result) if fmt == "json" else self.to_csv(result)
        filename = f"{self.artifact_basename(result)}-{suffix}"

        logger.info(f"Exported {fmt.upper()} report {filename}")
        return ExportArtifact(filename=filename, media_type=media_type, payload=text.encode("utf-8"))

    @staticmethod
    def save(artifact: ExportArtifact, directory: Union[str, Path]) -> Path:
        """
        Write an artifact into a directory, creating the directory if needed.

        Returns:
            Path of the written file
        """
        output_dir = Path(directory)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / artifact.filename
        output_file.write_bytes(artifact.payload)
        logger.info(f"Saved {artifact.filename} to {output_dir}")
        return output_file
