from navguard.policy.phishing import (
    CONFIDENCE_CHAR_SUBSTITUTION,
    CONFIDENCE_DEEP_SUBDOMAIN,
    CONFIDENCE_KNOWN_DOMAIN,
    CONFIDENCE_LOOKALIKE_DOMAIN,
    CONFIDENCE_RAW_IP,
    CONFIDENCE_SUSPICIOUS_PATTERN,
    PhishingDetector,
    lookalike_variants,
)


def test_character_substitution_beats_lookalike_domain():
    verdict = PhishingDetector().check("http://paypa1.com/login")
    assert verdict.is_phishing is True
    assert verdict.confidence == CONFIDENCE_CHAR_SUBSTITUTION == 90
    assert "paypal" in (verdict.reason or "")


def test_legitimate_brand_subdomain_is_not_phishing():
    verdict = PhishingDetector().check("https://accounts.google.com/signin")
    assert verdict.is_phishing is False
    assert verdict.confidence == 0
    assert verdict.reason is None


def test_known_domain_is_checked_first():
    verdict = PhishingDetector().check("https://paypal-verify.com/login/verify")
    assert verdict.confidence == CONFIDENCE_KNOWN_DOMAIN
    assert verdict.reason == "Known phishing domain"


def test_added_domain_becomes_known():
    detector = PhishingDetector()
    assert detector.add_domain("Evil-Bank.example") is True
    assert detector.add_domain("evil-bank.example") is False
    assert detector.check("https://evil-bank.example/").confidence == CONFIDENCE_KNOWN_DOMAIN


def test_brand_name_outside_its_own_domain_is_lookalike():
    verdict = PhishingDetector().check("https://paypal.account-help.com/")
    assert verdict.confidence == CONFIDENCE_LOOKALIKE_DOMAIN
    assert verdict.reason == "Suspicious paypal lookalike domain"


def test_brand_suffix_match_requires_dot_boundary():
    assert PhishingDetector().check("https://notpaypal.com/").confidence == CONFIDENCE_LOOKALIKE_DOMAIN
    assert PhishingDetector().check("https://www.paypal.com/").is_phishing is False


def test_lookalike_variants_substitute_one_position_at_a_time():
    variants = lookalike_variants("oslo")
    assert "0slo" in variants
    assert "o5lo" in variants
    assert "os1o" in variants
    assert "osl0" in variants
    assert "05l0" not in variants


def test_suspicious_phrase_pattern():
    verdict = PhishingDetector().check("https://example.net/account/suspended/restore")
    assert verdict.confidence == CONFIDENCE_SUSPICIOUS_PATTERN


def test_deep_subdomain_heuristic():
    verdict = PhishingDetector().check("https://a.b.c.d.example.org/")
    assert verdict.confidence == CONFIDENCE_DEEP_SUBDOMAIN


def test_raw_ipv4_in_url():
    verdict = PhishingDetector().check("http://192.168.10.4/files")
    assert verdict.confidence == CONFIDENCE_RAW_IP
    assert PhishingDetector().check("https://example.com/r?to=10.0.0.1").confidence == CONFIDENCE_RAW_IP


def test_clean_urls_and_empty_input_are_not_phishing():
    detector = PhishingDetector()
    for url in ("https://example.com/docs", "", None, "   ", "no structure at all"):
        verdict = detector.check(url)
        assert verdict.is_phishing is False
        assert verdict.confidence == 0


def test_custom_brand_table():
    from navguard.policy.phishing import Brand

    detector = PhishingDetector(known_domains=(), brands=[Brand("contoso", ("contoso.com",))])
    assert detector.check("https://c0ntoso.net").confidence == CONFIDENCE_CHAR_SUBSTITUTION
    assert detector.check("https://login.contoso.com").is_phishing is False
