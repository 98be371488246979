import pytest

from dlaunch.policy import RoutePolicy, load_policy
from dlaunch.settings import ConfigError


POLICY = """
authenticate_service_url: https://authenticate.example.com
policy:
  - from: https://plex.example.com
    to: http://plex:32400
    allow_public_unauthenticated_access: true
  - from: https://sonarr.*
    to: http://Sonarr:8989
  - from: https://plex-dup.example.com
    to: http://plex:32401
  - from: https://grafana.example.com
    to:
      - http://grafana:3000
      - http://grafana-b:3000
  - from: https://redirect.example.com
    redirect:
      https_redirect: true
"""


def test_load_policy_keeps_order_and_skips_entries_without_to(policy_file):
    policy = load_policy(policy_file(POLICY))

    assert [r.internal_host for r in policy.routes] == ["plex", "sonarr", "plex", "grafana"]
    assert policy.routes[0].public_host == "https://plex.example.com"


def test_lookup_is_case_insensitive_and_first_match_wins(policy_file):
    policy = load_policy(policy_file(POLICY))

    assert policy.public_host_for("PLEX") == "https://plex.example.com"
    assert policy.public_host_for("sonarr") == "https://sonarr.*"
    assert policy.public_host_for("grafana") == "https://grafana.example.com"
    assert policy.public_host_for("radarr") is None


def test_no_path_or_empty_document_means_no_routes(policy_file):
    assert load_policy(None) == RoutePolicy()
    assert load_policy(policy_file("")).routes == ()


def test_document_is_reread_on_every_call(policy_file):
    path = policy_file("policy:\n  - from: https://a.example.com\n    to: http://a:80\n")
    assert load_policy(path).public_host_for("a") == "https://a.example.com"

    policy_file("policy:\n  - from: https://b.example.com\n    to: http://a:80\n")
    assert load_policy(path).public_host_for("a") == "https://b.example.com"


def test_unreadable_policy_is_a_config_error(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        load_policy(str(tmp_path / "missing.yaml"))


@pytest.mark.parametrize(
    "text",
    [
        "policy: [unclosed",
        "- just\n- a list\n",
        "policy: 12\n",
        "policy:\n  - just-a-string\n",
    ],
)
def test_malformed_policy_is_a_config_error(policy_file, text):
    with pytest.raises(ConfigError):
        load_policy(policy_file(text))
