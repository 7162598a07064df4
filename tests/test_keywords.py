from romplan.pipeline.keywords import extract_keywords, is_narrow_topic

DEFAULT = ["growth", "b2b"]


def test_first_distinct_lowercase_tokens():
    kws = extract_keywords("Grow grow my B2B sales pipeline fast", limit=4, default=DEFAULT)
    assert kws == ["grow", "my", "b2b", "sales"]


def test_default_when_no_tokens():
    assert extract_keywords("?!? ...", limit=4, default=DEFAULT) == DEFAULT


def test_focus_policy_uses_default_for_off_topic_need():
    vocab = ["sales", "b2b"]
    assert is_narrow_topic("bake sourdough bread", vocab)
    assert extract_keywords("bake sourdough bread", limit=4, default=DEFAULT,
                            policy="focus", focus_vocabulary=vocab) == DEFAULT
    assert extract_keywords("boost sales", limit=4, default=DEFAULT,
                            policy="focus", focus_vocabulary=vocab) == ["boost", "sales"]
