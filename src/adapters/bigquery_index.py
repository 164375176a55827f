"""Popularity discovery through the public PyPI download dataset on BigQuery.

Credentials come from Application Default Credentials. Which flavor was
found (service-account key, GCE instance metadata, gcloud user login) is
resolved once at startup and kept on a `CredentialProvider`; discovery only
sees the `QueryExecutor` built from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Sequence

import google.auth
from google.api_core import exceptions as api_exceptions
from google.auth import compute_engine
from google.auth import exceptions as auth_exceptions
from google.auth.credentials import Credentials
from google.cloud import bigquery
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account

from core.errors import CredentialError, DiscoveryError

BQ_QUERY = """
    SELECT file.project, COUNT(*) AS num_downloads
    FROM `bigquery-public-data.pypi.file_downloads`
    WHERE
      details.installer.name = 'pip'
      AND
      DATE(timestamp)
        BETWEEN DATE_SUB(CURRENT_DATE(), INTERVAL 1 DAY)
        AND CURRENT_DATE()
    GROUP BY file.project
    ORDER BY num_downloads DESC
    LIMIT 1000;
"""

BQ_SCOPES = ("https://www.googleapis.com/auth/bigquery",)

CredentialKind = Literal["service_account", "instance_metadata", "user", "external"]


@dataclass(frozen=True)
class CredentialProvider:
    """Resolved ADC: which flavor, the credentials themselves, and the project."""

    kind: CredentialKind
    credentials: Credentials
    project_id: str


def _credential_kind(credentials: Credentials) -> CredentialKind:
    if isinstance(credentials, service_account.Credentials):
        return "service_account"
    if isinstance(credentials, compute_engine.Credentials):
        return "instance_metadata"
    if isinstance(credentials, user_credentials.Credentials):
        return "user"
    return "external"


def resolve_credential_provider(project_id: str | None = None) -> CredentialProvider:
    """Inspect the ambient environment for ADC; fatal when nothing usable is found."""

    try:
        credentials, adc_project = google.auth.default(scopes=BQ_SCOPES)
    except auth_exceptions.GoogleAuthError as exc:
        raise CredentialError(f"application default credentials unavailable: {exc}") from exc

    project = project_id or adc_project
    if not project:
        raise CredentialError("no Google Cloud project id: set PROJECT_ID")

    return CredentialProvider(
        kind=_credential_kind(credentials),
        credentials=credentials,
        project_id=project,
    )


class BigQueryExecutor:
    """`QueryExecutor` backed by `google.cloud.bigquery.Client`."""

    def __init__(self, client: bigquery.Client) -> None:
        self._client = client

    def run(self, query: str) -> list[Sequence[Any]]:
        job_config = bigquery.QueryJobConfig(use_legacy_sql=False)
        try:
            rows = self._client.query(query, job_config=job_config).result()
            return [tuple(row.values()) for row in rows]
        except (api_exceptions.GoogleAPICallError, auth_exceptions.GoogleAuthError) as exc:
            raise DiscoveryError(f"bigquery query failed: {exc}") from exc


def acquire_query_executor(provider: CredentialProvider) -> BigQueryExecutor:
    client = bigquery.Client(project=provider.project_id, credentials=provider.credentials)
    return BigQueryExecutor(client)


def project_names(rows: list[Sequence[Any]]) -> list[str]:
    """First column of every row, order kept; download counts are discarded."""

    names: list[str] = []
    for row in rows:
        if not row or not isinstance(row[0], str):
            raise DiscoveryError(f"invalid project name in bigquery row: {row!r}")
        names.append(row[0])
    return names
