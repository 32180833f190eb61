"""Shared pytest fixtures for the scoring engine test suite.

Provides raw request wizard payloads in the shapes stored by the request
form: an empty draft, a small low-risk change, and a large cross-system
change with every benefit category selected.
"""

import pytest


@pytest.fixture
def empty_payload() -> dict:
    """A draft request with nothing filled in."""
    return {}


@pytest.fixture
def minor_payload() -> dict:
    """A small, single-system change."""
    return {
        "impactedUsers": "5",
        "estimatedCost": "£750",
        "estimatedEffortHours": 6,
        "teamSize": 1,
        "systemsAffected": ["CRM"],
        "dependencies": [],
        "changeReasons": {"processImprovement": True},
        "processImprovementDetails": {
            "expectedEfficiency": "20%",
            "improvementTimeline": "3",
            "processDescription": "Remove a manual approval step",
        },
    }


@pytest.fixture
def major_payload() -> dict:
    """A large change touching many systems with every benefit selected."""
    return {
        "impactedUsers": 1200,
        "estimatedCost": "£65,000",
        "estimatedEffortHours": "1,400",
        "teamSize": "8",
        "complexity": 5,
        "testingRequired": 5,
        "documentationRequired": 4,
        "systemsAffected": ["CRM", "ERP", "Billing", "Portal", "Data Warehouse"],
        "dependencies": ["CR-101", "CR-102", "CR-103"],
        "changeReasons": {
            "revenueImprovement": True,
            "costReduction": True,
            "customerImpact": True,
            "processImprovement": True,
            "internalQoL": True,
        },
        "revenueDetails": {
            "expectedRevenue": "£40,000",
            "revenueTimeline": "12",
            "revenueDescription": "New self-service upsell flow",
        },
        "costReductionDetails": {
            "expectedSavings": "£24,000",
            "savingsDescription": "Retire legacy billing licences",
        },
        "customerImpactDetails": {"satisfactionRating": 8},
        "processImprovementDetails": {"expectedEfficiency": "35%"},
        "internalQoLDetails": {"usersAffected": "40"},
        "priorityFactors": {
            "businessValue": 9,
            "urgency": 7,
            "impactScope": 8,
            "riskLevel": 6,
            "resourceRequirement": 9,
            "dependency": 7,
            "strategicAlignment": 10,
            "customerImpact": 9,
        },
    }
