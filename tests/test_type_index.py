# -----------------------------------------------------------------------------
# Unit tests for build_type_index().
# -----------------------------------------------------------------------------

from cdk_prop_audit.ts_nodes import parse_source
from cdk_prop_audit.type_index import build_type_index


def test_indexes_interfaces_and_aliases():
    tree = parse_source("""
interface Foo { a: string; }
export interface Bar { b: string; }
type Baz = { c: string };
export type Qux = Foo | Bar;
const notAType = 1;
""")
    index = build_type_index(tree)
    assert set(index) == {"Foo", "Bar", "Baz", "Qux"}
    assert index["Foo"].type == "interface_declaration"
    assert index["Baz"].type == "type_alias_declaration"


def test_indexes_declarations_inside_namespaces():
    tree = parse_source("""
export namespace CfnBucket {
  export interface CorsRuleProperty { allowedMethods: string[]; }
}
""")
    assert "CorsRuleProperty" in build_type_index(tree)


def test_last_declaration_wins():
    tree = parse_source("""
interface Dup { first: string; }
namespace Other {
  export interface Dup { second: string; }
}
""")
    index = build_type_index(tree)
    assert "second" in index["Dup"].text.decode("utf-8")


def test_empty_source_gives_empty_index():
    assert build_type_index(parse_source("")) == {}


def test_namespaced_declarations_also_indexed_by_qualified_name():
    tree = parse_source("""
export namespace CfnInstance {
  export interface PrivateIpProperty { primary: boolean; }
}
export namespace CfnNetworkInterface {
  export interface PrivateIpProperty { other: string; }
}
""")
    index = build_type_index(tree)
    assert "primary" in index["CfnInstance.PrivateIpProperty"].text.decode("utf-8")
    assert "other" in index["CfnNetworkInterface.PrivateIpProperty"].text.decode("utf-8")
    assert index["PrivateIpProperty"] is not None
