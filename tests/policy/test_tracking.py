from navguard.policy.tracking import TrackingParamStripper


def test_clean_url_removes_tracking_params():
    stripper = TrackingParamStripper()
    assert stripper.clean_url("https://example.com/page?utm_source=x&id=5") == "https://example.com/page?id=5"


def test_clean_url_prefix_match_and_case_insensitive_keys():
    stripper = TrackingParamStripper()
    url = "https://shop.example/item?UTM_Medium=mail&utm_source_platform=1&fbclid=abc&color=red&_gat=1"
    assert stripper.clean_url(url) == "https://shop.example/item?color=red"


def test_clean_url_preserves_survivor_order_and_encoding():
    stripper = TrackingParamStripper()
    url = "https://example.com/s?z=last%20one&gclid=1&a=first&m=mid"
    assert stripper.clean_url(url) == "https://example.com/s?z=last%20one&a=first&m=mid"


def test_clean_url_drops_question_mark_when_nothing_survives():
    stripper = TrackingParamStripper()
    assert stripper.clean_url("https://example.com/a?utm_source=x&fbclid=y") == "https://example.com/a"


def test_clean_url_keeps_fragment():
    stripper = TrackingParamStripper()
    assert stripper.clean_url("https://example.com/a?utm_source=x&id=1#part") == "https://example.com/a?id=1#part"


def test_clean_url_without_query_is_unchanged():
    stripper = TrackingParamStripper()
    assert stripper.clean_url("https://example.com/a") == "https://example.com/a"
    assert stripper.clean_url("https://example.com/a?") == "https://example.com/a?"
    assert stripper.clean_url("") == ""
    assert stripper.clean_url(None) == ""


def test_clean_url_never_rewrites_no_rewrite_hosts():
    stripper = TrackingParamStripper()
    url = "https://rr4---sn.googlevideo.com/videoplayback?utm_source=x&source=youtube&ref=1"
    assert stripper.clean_url(url) == url


def test_no_rewrite_hosts_are_configurable():
    stripper = TrackingParamStripper(no_rewrite_hosts=["media.example"])
    assert stripper.clean_url("https://media.example/chunk?utm_source=a") == "https://media.example/chunk?utm_source=a"
    assert stripper.clean_url("https://googlevideo.com/v?utm_source=a") == "https://googlevideo.com/v"


def test_clean_url_fails_open_on_malformed_url():
    stripper = TrackingParamStripper()
    url = "https://example.com/a b?utm_source=x"
    result = stripper.strip(url)
    assert result.url == url
    assert result.fallback is True
    assert result.changed is False


def test_clean_url_is_idempotent():
    stripper = TrackingParamStripper()
    samples = [
        "https://example.com/page?utm_source=x&id=5",
        "https://example.com/?ref=a&refresh=1&keep=1",
        "https://example.com/a?utm_source=1#frag?utm_medium=2",
        "https://example.com/a?&&x=1&&utm_term=2",
        "https://example.com/a b?utm_source=x",
        "plain text",
    ]
    for url in samples:
        once = stripper.clean_url(url)
        assert stripper.clean_url(once) == once


def test_strip_reports_removed_keys():
    result = TrackingParamStripper().strip("https://example.com/?fbclid=1&Gclid=2&q=x")
    assert result.removed == ("fbclid", "gclid")
    assert result.url == "https://example.com/?q=x"
