import threading

from navguard.policy.blocklist import DomainBlocklist


def test_blocklist_matches_substring_anywhere_in_url():
    blocklist = DomainBlocklist.with_defaults()
    assert blocklist.is_blocked("https://www.google-analytics.com/collect?v=1") is True
    assert blocklist.is_blocked("https://www.facebook.com/tr?id=123") is True
    assert blocklist.match("https://cdn.DOUBLECLICK.net/ad.js") == "doubleclick.net"
    assert blocklist.is_blocked("https://example.com/") is False


def test_whitelist_wins_over_every_blocklist_entry():
    blocklist = DomainBlocklist(["youtube", "googlevideo.com", "doubleclick.net"])
    assert blocklist.is_blocked("https://www.youtube.com/watch?v=1&ad=doubleclick.net") is False
    assert blocklist.is_blocked("https://r3.googlevideo.com/videoplayback") is False
    assert blocklist.is_blocked("https://doubleclick.net/") is True


def test_custom_whitelist_replaces_default():
    blocklist = DomainBlocklist(["tracker.example"], whitelist=["intranet.example"])
    assert blocklist.is_blocked("https://intranet.example/?r=tracker.example") is False
    assert blocklist.is_blocked("https://youtube.com/?r=tracker.example") is True


def test_malformed_input_degrades_to_plain_substring_search():
    blocklist = DomainBlocklist(["evil.test"])
    assert blocklist.is_blocked("not a url but mentions EVIL.test somewhere") is True
    assert blocklist.is_blocked("") is False
    assert blocklist.is_blocked(None) is False


def test_add_and_remove_normalize_entries():
    blocklist = DomainBlocklist()
    assert blocklist.add("  Ads.Example.COM ") is True
    assert blocklist.add("ads.example.com") is False
    assert blocklist.add("   ") is False
    assert "ads.example.com" in blocklist
    assert blocklist.is_blocked("http://ads.example.com/pixel") is True
    assert blocklist.remove("ADS.example.com") is True
    assert blocklist.remove("ads.example.com") is False
    assert blocklist.is_blocked("http://ads.example.com/pixel") is False


def test_snapshot_is_not_affected_by_later_additions():
    blocklist = DomainBlocklist(["a.test"])
    before = blocklist.snapshot()
    blocklist.add("b.test")
    assert before == frozenset({"a.test"})
    assert blocklist.snapshot() == frozenset({"a.test", "b.test"})


def test_concurrent_additions_are_not_lost():
    blocklist = DomainBlocklist()

    def _worker(offset: int) -> None:
        for index in range(200):
            blocklist.add(f"host{offset}-{index}.test")
            blocklist.is_blocked("https://example.com/")

    threads = [threading.Thread(target=_worker, args=(offset,)) for offset in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(blocklist) == 1600


def test_match_follows_additions_and_removals():
    blocklist = DomainBlocklist(["tracker.test"])
    url = "https://cdn.tracker.test/pixel?src=ads.test"
    assert blocklist.match(url) == "tracker.test"
    blocklist.add("ads.test")
    assert blocklist.match(url) == "ads.test"
    blocklist.remove("ads.test")
    blocklist.remove("tracker.test")
    assert blocklist.match(url) is None
