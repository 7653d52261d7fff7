"""Tests for address parsing and allocation name forms."""

import pytest

from nomad_tramp import address, errors

# ---------------------------------------------------------------------------
# parse_host
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("myjob.web.0", ("myjob", "web", 0)),
        ("myjob.web.12", ("myjob", "web", 12)),
        ("myjob.web", ("myjob", "web", 0)),
        ("my.job.web.3", ("my.job", "web", 3)),
        ("my-job.task-group.1", ("my-job", "task-group", 1)),
    ],
)
def test_parse_host(host, expected):
    assert address.parse_host(host) == expected


@pytest.mark.parametrize("host", ["myjob", "", "myjob..0", ".web.0"])
def test_parse_host_rejects_malformed(host):
    with pytest.raises(errors.AddressError):
        address.parse_host(host)


# ---------------------------------------------------------------------------
# parse_address
# ---------------------------------------------------------------------------


def test_parse_full_address():
    spec = address.parse_address("sidecar@myjob.web.0%nodeA")
    assert spec == address.AddressSpecification(
        job="myjob",
        task_group="web",
        alloc_index=0,
        task="sidecar",
        node_name="nodeA",
    )


def test_parse_address_without_task_or_node():
    spec = address.parse_address("myjob.web.2")
    assert spec.task is None
    assert spec.node_name is None
    assert spec.alloc_index == 2


def test_address_round_trips_to_string():
    raw = "server@myjob.web.0%nodeA"
    assert str(address.parse_address(raw)) == raw


def test_from_parts_treats_empty_user_as_no_task():
    """The framework passes an empty user when the address has no task@."""
    spec = address.AddressSpecification.from_parts("", "myjob.web.0", "")
    assert spec.task is None
    assert spec.node_name is None


def test_negative_index_rejected():
    with pytest.raises(errors.AddressError):
        address.AddressSpecification(job="myjob", task_group="web", alloc_index=-1)


# ---------------------------------------------------------------------------
# Allocation name forms
# ---------------------------------------------------------------------------


def test_allocation_name_uses_bracket_index():
    spec = address.parse_address("myjob.web.0")
    assert spec.allocation_name == "myjob.web[0]"


def test_canonical_name_from_dotted_form():
    assert address.canonical_allocation_name("myjob.web.0") == "myjob.web[0]"


def test_canonical_name_keeps_bracket_form():
    assert address.canonical_allocation_name("myjob.web[3]") == "myjob.web[3]"


def test_display_name_rewrites_bracket_index():
    assert address.display_allocation_name("myjob.web[2]") == "myjob.web.2"
