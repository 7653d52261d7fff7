"""Tests for completion candidates built from the all-allocations listing."""

from nomad_tramp import completion


def test_only_running_allocations_listed(make_client, allocation):
    body = [
        allocation("a1", "myjob.web[0]", ["server"], node_name="nodeA"),
        allocation("a2", "myjob.web[1]", ["server"], client_status="complete"),
        allocation("a3", "batch.run[2]", ["worker"], node_name="nodeB"),
    ]

    candidates = completion.list_running(make_client(body=body))

    assert candidates == [
        completion.CompletionCandidate(
            task="server",
            host="myjob.web.0%nodeA",
            namespace="default",
        ),
        completion.CompletionCandidate(
            task="worker",
            host="batch.run.2%nodeB",
            namespace="default",
        ),
    ]


def test_one_candidate_per_task(make_client, myjob_allocations):
    candidates = completion.list_running(make_client(body=myjob_allocations))
    assert [c.task for c in candidates] == ["server", "sidecar"]
    assert {c.host for c in candidates} == {"myjob.web.0%nodeA"}


def test_bracket_index_rendered_dotted(make_client, allocation):
    body = [allocation("a1", "myjob.web[2]", ["server"], node_name="nodeC")]
    candidates = completion.list_running(make_client(body=body))
    assert candidates[0].host == "myjob.web.2%nodeC"


def test_queries_all_namespaces(make_client, requests_seen):
    completion.list_running(make_client(body=[]))
    assert requests_seen[0].url.path == "/v1/allocations"
    assert requests_seen[0].url.params["namespace"] == "*"


def test_no_running_allocations(make_client, allocation):
    body = [allocation("a1", "myjob.web[0]", ["server"], client_status="failed")]
    assert completion.list_running(make_client(body=body)) == []


def test_format_candidates():
    candidates = [
        completion.CompletionCandidate(task="server", host="myjob.web.0%nodeA"),
        completion.CompletionCandidate(task="sidecar", host="myjob.web.0%nodeA"),
    ]
    assert completion.format_candidates(candidates) == (
        "server@myjob.web.0%nodeA\nsidecar@myjob.web.0%nodeA"
    )


def test_candidates_carry_namespace(make_client, allocation):
    body = [allocation("a1", "myjob.web[0]", ["server"])]
    body[0]["Namespace"] = "prod"

    candidates = completion.list_running(make_client(body=body))

    assert candidates[0].namespace == "prod"
    assert str(candidates[0]) == "server@myjob.web.0%nodeA"


def test_lists_single_namespace(make_client, requests_seen):
    completion.list_running(make_client(body=[]), namespace="prod")
    assert requests_seen[0].url.params["namespace"] == "prod"
