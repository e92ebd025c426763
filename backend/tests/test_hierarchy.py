"""Hierarchy resolution against the seeded telephony databases."""

from __future__ import annotations

import pytest

from portal.core.constants import ALL, SENTINEL
from portal.core.errors import HierarchyUserNotFoundError
from portal.repositories import users as user_repository
from portal.services.hierarchy import (
    HierarchyResult,
    format_hierarchy,
    resolve_hierarchy,
    walk_supervisors,
)


async def _resolve(account_db, master_db, roles, user_id, **kwargs) -> HierarchyResult:
    return await resolve_hierarchy(account_db, master_db, roles, user_id, **kwargs)


async def test_agent_fast_path_sets_only_agent_id(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "AG1")

    assert result.agent_id == "AG1"
    assert result.access_level == 4
    assert [result.tenant_id, result.service, result.category_id,
            result.coordinator_id, result.team_lead_id] == [SENTINEL] * 5


async def test_agent_full_walk_fills_ancestors(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "AG1", agent_fast_path=False)

    assert result.agent_id == "AG1"
    assert result.team_lead_id == "TL1"
    assert result.coordinator_id == "KOOR1"
    assert result.tenant_id == "T1"
    assert result.service == "Inbound Voice"
    assert result.category_id == "CAT1"


async def test_team_lead_gets_supervisor_as_coordinator(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "TL1")

    assert result.team_lead_id == "TL1"
    assert result.coordinator_id == "KOOR1"
    assert result.agent_id == SENTINEL


async def test_team_lead_with_dangling_supervisor_keeps_sentinel(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "TL2")

    assert result.team_lead_id == "TL2"
    assert result.coordinator_id == SENTINEL


async def test_coordinator_fills_only_coordinator(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "KOOR1")

    assert result.coordinator_id == "KOOR1"
    assert result.team_lead_id == SENTINEL
    assert result.agent_id == SENTINEL


async def test_mapping_tenant_wins_over_category_tenant(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "KOOR1")

    assert result.tenant_id == "T1"
    assert result.service == "Inbound Voice"
    assert result.category_id == "CAT1"


async def test_category_tenant_used_when_mapping_has_none(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "TL1")

    assert result.tenant_id == "T9"


async def test_inactive_category_keeps_service_sentinel(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "TL3")

    assert result.tenant_id == "T3M"
    assert result.service == SENTINEL
    assert result.category_id == SENTINEL


async def test_inactive_mapping_falls_back_to_user_tenant(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "KOOR2")

    assert result.tenant_id == "T4"
    assert result.service == SENTINEL
    assert result.coordinator_id == "KOOR2"


async def test_super_admin_without_mapping_sees_all(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "ADMIN1")

    assert result.tenant_id == ALL
    assert result.service == ALL
    assert result.coordinator_id == "ADMIN1"


async def test_external_tenant_uses_own_id(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "EXT001")

    assert result.tenant_id == "EXT001"
    assert result.service == ALL
    assert result.agent_id == "EXT001"


async def test_tenant_with_tenant_id(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "TEN2")

    assert result.tenant_id == "T7"
    assert result.service == ALL


async def test_unknown_level_is_placed_as_agent(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "QA1")

    assert result.access_level == 6
    assert result.agent_id == "QA1"
    assert result.coordinator_id == SENTINEL


async def test_user_without_role_defaults_to_level_zero(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "NOROLE1")

    assert result.access_level == 0
    assert result.coordinator_id == "NOROLE1"
    assert result.tenant_id == "T1"


async def test_missing_user_is_fatal(account_db, master_db, roles):
    with pytest.raises(HierarchyUserNotFoundError) as exc_info:
        await _resolve(account_db, master_db, roles, "NOBODY")

    assert exc_info.value.user_id == "NOBODY"


async def test_supervisor_cycle_stops_walk(account_db, master_db, roles):
    result = await _resolve(account_db, master_db, roles, "CYC1", agent_fast_path=False)

    assert result.agent_id == "CYC1"
    assert result.team_lead_id == "CYC2"
    assert result.coordinator_id == SENTINEL


async def test_walk_stops_at_missing_supervisor(account_db):
    user = await user_repository.get_user_by_id(account_db, "ORPHAN1")

    assert await walk_supervisors(account_db, user) == []


async def test_walk_respects_hop_limit(account_db):
    user = await user_repository.get_user_by_id(account_db, "AG1")

    chain = await walk_supervisors(account_db, user, max_hops=1)

    assert [u.id_user for u in chain] == ["TL1"]


async def test_resolution_is_repeatable(account_db, master_db, roles):
    first = await _resolve(account_db, master_db, roles, "TL1")
    second = await _resolve(account_db, master_db, roles, "TL1")

    assert first == second
    assert format_hierarchy(first) == format_hierarchy(second)


# ─── Formatting ───────────────────────────────

def test_format_has_six_fields_in_order():
    result = HierarchyResult(
        tenant_id="T1", service="Voice", category_id="CAT1",
        coordinator_id="K1", team_lead_id="TL1", agent_id="0",
    )

    assert format_hierarchy(result) == "T1 - Voice - CAT1 - K1 - TL1 - 0"


def test_format_never_emits_empty_tokens():
    result = HierarchyResult(tenant_id="", service="  ", category_id=None)

    tokens = format_hierarchy(result).split(" - ")

    assert len(tokens) == 6
    assert all(token == SENTINEL for token in tokens)


def test_format_keeps_field_count_when_values_contain_separator():
    result = HierarchyResult(full_name="Budi - Santoso", tenant_id="T1", service="Inbound - Voice")

    formatted = format_hierarchy(result, include_full_name=True)

    assert formatted == "Budi-Santoso - T1 - Inbound-Voice - 0 - 0 - 0 - 0"
    assert len(formatted.split(" - ")) == 7


def test_format_with_full_name_prepends_seventh_field():
    result = HierarchyResult(full_name="Budi", coordinator_id="K1")

    formatted = format_hierarchy(result, include_full_name=True)

    assert formatted == "Budi - 0 - 0 - 0 - K1 - 0 - 0"
    assert len(formatted.split(" - ")) == 7


def test_to_dict_uses_camel_case_keys():
    data = HierarchyResult(agent_id="AG1", access_level=4).to_dict()

    assert data["agentId"] == "AG1"
    assert data["teamLeadId"] == SENTINEL
    assert data["accessLevel"] == 4
