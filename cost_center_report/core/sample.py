"""Built-in example dataset for trying the report without credentials."""
from __future__ import annotations

from typing import Any


def _center(center_id: str, name: str, state: str, *resources: tuple[str, str]) -> dict[str, Any]:
    return {
        "id": center_id,
        "name": name,
        "state": state,
        "resources": [{"type": kind, "name": resource} for kind, resource in resources],
    }


def sample_document() -> dict[str, Any]:
    return {
        "costCenters": [
            _center(
                "78b18988-0df4-4118-bda8-8167132a2256",
                "still-First",
                "active",
                ("Repo", "bryant-test-org/blobfuse-test"),
            ),
            _center(
                "d8a3b08b-02fd-4c87-91fd-dad18e71b7a7",
                "el-segundo",
                "active",
                ("User", "gregoriousmonk"),
                ("Org", "gmondello-temp-test"),
            ),
            _center("c59f5d06-6ecc-44a9-bbef-a40e398b4392", "123123123", "deleted"),
            _center("3b080bd5-f253-4671-b77d-3558805b4fca", "ServiceID_1234567", "active"),
            _center(
                "50d1ac75-20ac-436d-8e43-8a07e8cc7577",
                "mp-test",
                "active",
                ("Repo", "10k-repos/test-public"),
            ),
            _center(
                "84b98dc5-04c5-4400-9e21-4b785b15757e",
                "test-subset-km",
                "active",
                ("Org", "Avocado-Extra-Charge"),
            ),
            _center(
                "a1b2c3d4-e5f6-7890-1234-567890abcdef",
                "Marketing Division",
                "active",
                ("Org", "marketing-team"),
                ("Repo", "marketing-team/website"),
                ("Repo", "marketing-team/campaigns"),
                ("User", "sarah.marketing"),
                ("User", "john.designer"),
                ("User", "mike.content"),
            ),
            _center(
                "f9e8d7c6-b5a4-9384-7261-504938271650",
                "Engineering Hub",
                "active",
                ("Org", "engineering-core"),
                ("Org", "engineering-platform"),
                ("Repo", "engineering-core/api-gateway"),
                ("Repo", "engineering-core/user-service"),
                ("Repo", "engineering-platform/deployment-tools"),
                ("User", "alice.architect"),
                ("User", "bob.backend"),
                ("User", "charlie.devops"),
                ("User", "diana.frontend"),
            ),
            _center(
                "5a4b3c2d-1e0f-9876-5432-1098765fedcb",
                "Research Lab",
                "active",
                ("Repo", "research-lab/ml-experiments"),
                ("Repo", "research-lab/data-analysis"),
                ("User", "dr.researcher"),
            ),
            _center("9z8y7x6w-5v4u-3t2s-1r0q-9p8o7n6m5l4k", "Legacy Project Alpha", "deleted"),
            _center("1a2b3c4d-5e6f-7g8h-9i0j-1k2l3m4n5o6p", "Legacy Project Beta", "deleted"),
        ]
    }
