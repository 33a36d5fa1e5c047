# -----------------------------------------------------------------------------
# Unit tests for diff_schemas() / compare_nested().
# -----------------------------------------------------------------------------

from cdk_prop_audit.diff import diff_schemas
from cdk_prop_audit.schema import ConstructSchema, MissingPropertyRecord, PropertySchema, normalize_construct_name


def _prop(name, children=None):
    if children is None:
        return PropertySchema(name)
    return PropertySchema(name, {c.name: c for c in children})


def _schema(name, *props, module="mod"):
    return ConstructSchema(module, name, tuple(p.name for p in props), {p.name: p for p in props})


def test_top_level_missing_in_declared_order():
    declared = [_schema("CfnX", _prop("a"), _prop("b"), _prop("c"))]
    implemented = [_schema("CfnX", _prop("c"), _prop("a"))]
    assert diff_schemas(declared, implemented) == [MissingPropertyRecord("mod", "CfnX", ("b",))]


def test_identical_schemas_produce_nothing():
    schema = _schema("CfnX", _prop("a"), _prop("x", [_prop("y", [_prop("z")])]))
    assert diff_schemas([schema], [schema]) == []


def test_missing_parent_is_not_reported_again_for_children():
    declared = [_schema("CfnX", _prop("x", [_prop("y"), _prop("z")]))]
    implemented = [_schema("CfnX", _prop("other"))]
    assert diff_schemas(declared, implemented)[0].missing_props == ("x",)


def test_missing_nested_child():
    declared = [_schema("CfnX", _prop("x", [_prop("y"), _prop("z")]))]
    implemented = [_schema("CfnX", _prop("x", [_prop("y")]))]
    assert diff_schemas(declared, implemented)[0].missing_props == ("x.z",)


def test_leaf_implementation_misses_every_declared_child():
    declared = [_schema("CfnX", _prop("x", [_prop("y"), _prop("z")]))]
    implemented = [_schema("CfnX", _prop("x"))]
    assert diff_schemas(declared, implemented)[0].missing_props == ("x.y", "x.z")


def test_deep_paths_and_ordering():
    declared = [_schema(
        "CfnX",
        _prop("top"),
        _prop("a", [_prop("b", [_prop("c"), _prop("d")]), _prop("e")]),
    )]
    implemented = [_schema("CfnX", _prop("a", [_prop("b", [_prop("c")])]))]
    assert diff_schemas(declared, implemented)[0].missing_props == ("top", "a.e", "a.b.d")


def test_matching_requires_module_and_normalized_name():
    declared = [_schema("CfnX", _prop("a"), _prop("b"), module="s3")]
    assert diff_schemas(declared, [_schema("CfnX", _prop("a"), module="sqs")]) == []
    assert diff_schemas(declared, [_schema("X", _prop("a"), module="s3")])[0].missing_props == ("b",)


def test_first_matching_implementation_wins():
    declared = [_schema("CfnX", _prop("a"), _prop("b"))]
    implemented = [_schema("CfnX", _prop("a")), _schema("CfnX", _prop("a"), _prop("b"))]
    assert diff_schemas(declared, implemented)[0].missing_props == ("b",)


def test_output_sorted_by_module_then_name():
    declared = [
        _schema("CfnZeta", _prop("a"), module="b"),
        _schema("CfnAlpha", _prop("a"), module="b"),
        _schema("CfnBeta", _prop("a"), module="a"),
    ]
    implemented = [
        _schema("CfnZeta", _prop("z"), module="b"),
        _schema("CfnAlpha", _prop("z"), module="b"),
        _schema("CfnBeta", _prop("z"), module="a"),
    ]
    assert [(r.module, r.name) for r in diff_schemas(declared, implemented)] == [
        ("a", "CfnBeta"),
        ("b", "CfnAlpha"),
        ("b", "CfnZeta"),
    ]


def test_normalize_construct_name():
    assert normalize_construct_name("CfnDistribution") == "Distribution"
    assert normalize_construct_name("Distribution") == "Distribution"
    assert normalize_construct_name("MyCfnThing") == "MyCfnThing"


def test_record_serializes_with_camel_case_key():
    record = MissingPropertyRecord("cloudfront", "CfnDistribution", ("a", "b.c"))
    assert record.to_dict() == {"module": "cloudfront", "name": "CfnDistribution", "missingProps": ["a", "b.c"]}
