import pytest

from fitapi.domain.failures import (
    ExclusiveParameterViolation,
    MissingAuthentication,
    MissingConditionalParameter,
    MissingOneOfRequired,
    MissingRequiredParameters,
    UnresolvableUrl,
)
from fitapi.registry.lookup import lookup
from fitapi.registry.model import OptionalParams
from fitapi.validate.params import normalize_params
from fitapi.validate.rules import Ok, check_rule, validate

TOKEN, SECRET = "tok", "sec"


def test_required_lists_full_set_and_missing_subset():
    res = validate(lookup("api-log-water"), {"date": "2024-01-01"}, TOKEN, SECRET)
    assert isinstance(res, MissingRequiredParameters)
    assert res.required == ("amount", "date")
    assert res.missing == ("amount",)
    assert res.message == (
        "api-log-water requires POST parameters ['amount', 'date']. You're missing ['amount']."
    )


def test_exclusive_too_many_lists_offenders_in_order_supplied():
    res = validate(
        lookup("api-create-invite"),
        {"invitedUserId": "22ABC", "invitedUserEmail": "a@b.com"},
        TOKEN,
        SECRET,
    )
    assert isinstance(res, ExclusiveParameterViolation)
    assert res.allowed == ("invitedUserEmail", "invitedUserId")
    assert res.supplied == ("invitedUserId", "invitedUserEmail")
    assert not res.too_few
    assert "You used 'invitedUserId' AND 'invitedUserEmail'." in res.message


def test_exclusive_too_few():
    res = validate(lookup("api-create-invite"), {}, TOKEN, SECRET)
    assert isinstance(res, ExclusiveParameterViolation)
    assert res.too_few
    assert res.message == (
        "api-create-invite requires one of these POST parameters: "
        "['invitedUserEmail', 'invitedUserId']."
    )


@pytest.mark.parametrize("key", ["invitedUserEmail", "invitedUserId"])
def test_exclusive_exactly_one_passes_regardless_of_other_keys(key):
    res = validate(lookup("api-create-invite"), {key: "x", "other": "y"}, TOKEN, SECRET)
    assert isinstance(res, Ok)


def test_one_required():
    res = validate(lookup("api-update-activity-weekly-goals"), {"unrelated": "1"}, TOKEN, SECRET)
    assert isinstance(res, MissingOneOfRequired)
    assert res.choices == ("steps", "distance", "floors")

    ok = validate(lookup("api-update-activity-weekly-goals"), {"floors": "10"}, TOKEN, SECRET)
    assert isinstance(ok, Ok)


def test_required_if_names_trigger_and_dependent():
    params = {
        "activityName": "jazzercise",
        "startTime": "12:00",
        "durationMillis": "600000",
        "date": "2024-01-01",
    }
    res = validate(lookup("api-log-activity"), params, TOKEN, SECRET)
    assert isinstance(res, MissingConditionalParameter)
    assert res.trigger == "activityName"
    assert res.dependent == "manualCalories"
    assert res.message == (
        "api-log-activity requires POST parameter manualCalories "
        "when you use POST parameter activityName."
    )


def test_rules_are_checked_in_declared_order():
    # Exclusive is declared before Required on api-log-activity
    res = validate(lookup("api-log-activity"), {}, TOKEN, SECRET)
    assert isinstance(res, ExclusiveParameterViolation)


def test_rules_come_before_authentication():
    res = validate(lookup("api-log-water"), {})
    assert isinstance(res, MissingRequiredParameters)


def test_flat_url_placeholder_missing():
    res = validate(lookup("api-delete-water-log"), {}, TOKEN, SECRET)
    assert isinstance(res, UnresolvableUrl)
    assert res.candidates == (("water-log-id",),)
    assert res.message == (
        "api-delete-water-log requires ['water-log-id']. You're missing ['water-log-id']."
    )


def test_variant_url_lists_every_option():
    res = validate(lookup("api-get-body-weight"), {"period": "7d"}, TOKEN, SECRET)
    assert isinstance(res, UnresolvableUrl)
    assert res.candidates == (("base-date", "end-date"), ("base-date", "period"), ("date",))
    assert res.supplied == ("period",)
    assert res.message == (
        "api-get-body-weight requires 1 of 3 options: (1) ['base-date', 'end-date'] "
        "(2) ['base-date', 'period'] (3) ['date']. You supplied: ['period']."
    )


def test_url_comes_before_authentication():
    res = validate(lookup("api-get-food-logs"), {})
    assert isinstance(res, UnresolvableUrl)


def test_auth_required():
    res = validate(lookup("api-get-food-logs"), {"date": "today"}, TOKEN, "")
    assert isinstance(res, MissingAuthentication)
    assert res.exemption_hint is None
    assert res.message == "api-get-food-logs requires user auth_token and auth_secret."


def test_auth_not_required():
    assert isinstance(validate(lookup("api-search-foods"), {"query": "apple"}), Ok)


def test_user_id_exempts_from_auth():
    method = lookup("api-get-user-info")

    res = validate(method, {})
    assert isinstance(res, MissingAuthentication)
    assert res.exemption_hint == "user-id"
    assert "unless you include" in res.message

    assert isinstance(validate(method, {"user-id": "228tt7"}), Ok)
    assert isinstance(validate(method, {}, TOKEN, SECRET), Ok)


def test_delete_subscription_without_user_id_or_credentials():
    res = validate(
        lookup("api-delete-subscription"),
        {"collection-path": "all", "subscription-id": "42"},
    )
    assert isinstance(res, MissingAuthentication)
    assert res.exemption_hint == "user-id"


def test_ok_carries_resolution():
    res = validate(lookup("api-get-body-weight"), {"date": "2024-01-01"}, TOKEN, SECRET)
    assert isinstance(res, Ok)
    assert res.resolution.variant == "date"
    assert res.resolution.segments == ("user", "-", "body", "log", "weight", "date", "2024-01-01")


def test_empty_user_id_does_not_exempt_from_credentials():
    res = validate(lookup("api-get-user-info"), {"user-id": ""})
    assert isinstance(res, MissingAuthentication)
    assert res.exemption_hint == "user-id"

    ok = validate(lookup("api-get-user-info"), {"user-id": ""}, TOKEN, SECRET)
    assert isinstance(ok, Ok)
    assert ok.resolution.segments == ("user", "-", "profile")


def test_optional_params_rule_never_fails():
    method = lookup("api-log-water")
    rule = next(r for r in method.rules if isinstance(r, OptionalParams))
    assert rule.names == ("unit",)
    assert check_rule(method, rule, normalize_params({})) is None
