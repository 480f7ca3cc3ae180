from fitapi.validate.params import as_text, normalize_params


def test_keys_and_string_values_are_lower_cased():
    bag = normalize_params({"Query": "Apple", "Response-Format": "JSON"})
    assert bag.values == {"query": "apple", "response-format": "json"}
    assert bag.has("QUERY")
    assert bag.get("query") == "apple"


def test_post_parameters_are_flattened_and_keep_their_values():
    bag = normalize_params(
        {
            "api-method": "API-Create-Invite",
            "post_parameters": {"invitedUserEmail": "Friend@Example.com"},
        }
    )
    assert bag.keys() == ("api-method", "inviteduseremail")
    assert bag.get("invitedUserEmail") == "Friend@Example.com"
    assert "post_parameters" not in bag.values


def test_request_headers_block_is_kept_apart():
    bag = normalize_params({"request_headers": {"Accept-Language": "en_US"}, "date": "today"})
    assert bag.headers == {"accept-language": "en_US"}
    assert bag.header("accept-language") == "en_US"
    assert not bag.has("accept-language")


def test_top_level_header_value_is_found():
    bag = normalize_params({"Accept-Locale": "en_US"})
    assert bag.header("Accept-Locale") == "en_us"


def test_non_string_values_preserved_and_none_dropped():
    bag = normalize_params({"Amount": 500, "favorite": True, "unit": None})
    assert bag.values == {"amount": 500, "favorite": True}
    assert as_text(bag.get("amount")) == "500"
    assert as_text(bag.get("favorite")) == "true"


def test_supplied_reports_declared_names_in_observed_order():
    bag = normalize_params({"invitedUserId": "1", "x": "y", "invitedUserEmail": "a@b.c"})
    assert bag.supplied(("invitedUserEmail", "invitedUserId")) == ("invitedUserId", "invitedUserEmail")


def test_empty_and_missing_params():
    assert normalize_params(None).values == {}
    assert normalize_params({}).keys() == ()
