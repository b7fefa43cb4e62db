"""Tests for runtimecompat tree classification and reporting."""

import pytest
from runtimecompat import (
    Aggregator,
    EmptyBaselineError,
    Interior,
    Leaf,
    Status,
    TreeParseError,
    TypeTag,
    aggregate,
    build_table,
    classify,
    is_mock_module,
    lookup,
    parse_tree,
    percentage,
)


BASELINE = {
    "buffer": {
        "Buffer": "class",
        "constants": {
            "MAX_LENGTH": "number",
            "MAX_STRING_LENGTH": "number",
        },
        "atob": "function",
    },
    "fs": {
        "readFile": "function",
        "promises": {"readFile": "function"},
    },
}

PARTIAL = {
    "buffer": {
        "Buffer": "function",
        "constants": {
            "MAX_LENGTH": "number",
            "MAX_STRING_LENGTH": "string",
        },
        "atob": "stub",
    },
    "fs": {"default": {"*default*": "object"}},
}

BARE = {
    "buffer": {"Buffer": "missing"},
}


class TestTreeModel:
    """Test parsing and navigating API trees."""

    def test_parse_preserves_key_order(self):
        """Test that children keep their declared order."""
        tree = parse_tree({"zlib": "object", "assert": "function", "buffer": "object"})
        assert list(tree.children) == ["zlib", "assert", "buffer"]

    def test_parse_leaves_and_interiors(self):
        """Test that objects become interiors and tags become leaves."""
        tree = parse_tree(BASELINE)
        assert isinstance(tree, Interior)
        assert isinstance(tree.children["buffer"], Interior)
        assert tree.children["buffer"].children["Buffer"] == Leaf(TypeTag.CLASS)

    def test_empty_object_has_no_children(self):
        """Test that an empty object parses to a childless interior."""
        tree = parse_tree({"process": {"env": {}}})
        assert lookup(tree, ("process", "env")) == Interior({})
        assert lookup(tree, ("process", "env", "HOME")) is None

    def test_invalid_value_reports_path(self):
        """Test that unknown values are rejected with their key path."""
        with pytest.raises(TreeParseError) as exc_info:
            parse_tree({"util": {"inspect": "symbol"}})
        assert exc_info.value.path == ("util", "inspect")

    def test_lookup_absent_path(self):
        """Test that unknown paths and paths through leaves resolve to None."""
        tree = parse_tree({"util": "object"})
        assert lookup(tree, ("events",)) is None
        assert lookup(tree, ("util", "inspect")) is None

    def test_mock_module_detection(self):
        """Test structural detection of placeholder modules."""
        assert is_mock_module(parse_tree(PARTIAL), "fs") is True
        assert is_mock_module(parse_tree(PARTIAL), "buffer") is False
        assert is_mock_module(parse_tree(PARTIAL), "net") is False

    def test_mock_module_needs_single_keys(self):
        """Test that extra keys at either level disqualify a placeholder."""
        extra_export = parse_tree({"fs": {"default": {"*default*": "object", "open": "function"}}})
        extra_member = parse_tree({"fs": {"default": {"*default*": "object"}, "open": "function"}})
        assert is_mock_module(extra_export, "fs") is False
        assert is_mock_module(extra_member, "fs") is False


class TestClassifier:
    """Test classification of a single leaf."""

    def test_equal_tags_supported(self):
        """Test that identical tags are supported."""
        target = parse_tree({"os": {"cpus": "function"}})
        assert classify(TypeTag.FUNCTION, target, ("os", "cpus")) == Status.SUPPORTED

    def test_function_class_equivalence(self):
        """Test that function and class never count as a mismatch."""
        as_class = parse_tree({"events": {"EventEmitter": "class"}})
        as_function = parse_tree({"events": {"EventEmitter": "function"}})
        path = ("events", "EventEmitter")
        assert classify(TypeTag.FUNCTION, as_class, path) == Status.SUPPORTED
        assert classify(TypeTag.CLASS, as_function, path) == Status.SUPPORTED

    def test_other_tag_difference_is_mismatch(self):
        """Test that a different tag is a mismatch."""
        target = parse_tree({"os": {"EOL": "object"}})
        assert classify(TypeTag.STRING, target, ("os", "EOL")) == Status.MISMATCH

    def test_stub_value(self):
        """Test that a stub leaf classifies as stub."""
        target = parse_tree({"os": {"cpus": "stub"}})
        assert classify(TypeTag.FUNCTION, target, ("os", "cpus")) == Status.STUB

    def test_missing_value(self):
        """Test that an explicit missing tag is unsupported."""
        target = parse_tree({"os": {"cpus": "missing"}})
        assert classify(TypeTag.FUNCTION, target, ("os", "cpus")) == Status.UNSUPPORTED

    def test_missing_in_both_is_supported(self):
        """Test that missing in baseline and target agrees."""
        target = parse_tree({"os": {"cpus": "missing"}})
        assert classify(TypeTag.MISSING, target, ("os", "cpus")) == Status.SUPPORTED

    def test_absent_value_unsupported(self):
        """Test that a path absent from the target is unsupported."""
        target = parse_tree({"os": {"cpus": "function"}})
        assert classify(TypeTag.FUNCTION, target, ("os", "arch")) == Status.UNSUPPORTED
        assert classify(TypeTag.FUNCTION, target, ("net", "connect")) == Status.UNSUPPORTED

    def test_object_target_is_mismatch(self):
        """Test that an object value where the baseline has a tag is a mismatch."""
        nested = parse_tree({"os": {"constants": {"signals": "object"}}})
        empty = parse_tree({"os": {"constants": {}}})
        path = ("os", "constants")
        assert classify(TypeTag.OBJECT, nested, path) == Status.MISMATCH
        assert classify(TypeTag.FUNCTION, nested, path) == Status.MISMATCH
        assert classify(TypeTag.OBJECT, empty, path) == Status.MISMATCH

    def test_empty_object_baseline(self):
        """Test that no present target value matches an empty-object baseline."""
        target = parse_tree({"process": {
            "env": "object", "argv": {}, "title": "stub", "pid": "missing",
        }})
        assert classify(None, target, ("process", "env")) == Status.MISMATCH
        assert classify(None, target, ("process", "argv")) == Status.MISMATCH
        assert classify(None, target, ("process", "title")) == Status.STUB
        assert classify(None, target, ("process", "pid")) == Status.UNSUPPORTED
        assert classify(None, target, ("process", "ppid")) == Status.UNSUPPORTED

    def test_mock_module_status_parameter(self):
        """Test that placeholder modules use the requested status."""
        target = parse_tree(PARTIAL)
        path = ("fs", "readFile")
        assert classify(TypeTag.FUNCTION, target, path) == Status.STUB
        assert classify(
            TypeTag.FUNCTION, target, path, mock_module_status=Status.UNSUPPORTED
        ) == Status.UNSUPPORTED


class TestAggregator:
    """Test the recursive walk and roll-up."""

    def setup_method(self):
        self.baseline = parse_tree(BASELINE)
        self.targets = {"partial": parse_tree(PARTIAL), "bare": parse_tree(BARE)}

    def test_rows_in_pre_order(self):
        """Test that interior rows precede their children in declared order."""
        result = aggregate(self.baseline, self.targets)
        assert [row.key for row in result.rows] == [
            "buffer",
            "buffer.Buffer",
            "buffer.constants",
            "buffer.constants.MAX_LENGTH",
            "buffer.constants.MAX_STRING_LENGTH",
            "buffer.atob",
            "fs",
            "fs.readFile",
            "fs.promises",
            "fs.promises.readFile",
        ]
        assert result.leaf_total == 6

    def test_leaf_statuses_per_target(self):
        """Test that leaf rows hold one status per target, in target order."""
        rows = {row.key: row for row in aggregate(self.baseline, self.targets).rows}
        assert rows["buffer.Buffer"].cells == [Status.SUPPORTED, Status.UNSUPPORTED]
        assert rows["buffer.constants.MAX_STRING_LENGTH"].cells == [
            Status.MISMATCH, Status.UNSUPPORTED
        ]
        assert rows["buffer.atob"].cells == [Status.STUB, Status.UNSUPPORTED]
        assert rows["fs.promises.readFile"].cells == [Status.STUB, Status.UNSUPPORTED]
        assert rows["buffer.atob"].to_list() == ["buffer.atob", 0, "supported", "stub", "unsupported"]

    def test_interior_rows_tally_leaves(self):
        """Test interior leaf counts and tallies."""
        rows = {row.key: row for row in aggregate(self.baseline, self.targets).rows}
        assert rows["buffer"].to_list() == ["buffer", 4, 4, "2/1/1/0", "0/0/0/4"]
        assert rows["buffer.constants"].to_list() == [
            "buffer.constants", 2, 2, "1/1/0/0", "0/0/0/2"
        ]
        assert rows["fs"].to_list() == ["fs", 2, 2, "0/0/2/0", "0/0/0/2"]

    def test_tally_sums_to_leaf_count(self):
        """Test that every interior tally adds up to its leaf count."""
        for row in aggregate(self.baseline, self.targets).rows:
            if row.is_leaf:
                continue
            for tally in row.cells:
                assert tally.total == row.leaf_count

    def test_deterministic(self):
        """Test that repeated runs produce identical rows."""
        first = [row.to_list() for row in aggregate(self.baseline, self.targets).rows]
        second = [row.to_list() for row in aggregate(self.baseline, self.targets).rows]
        assert first == second

    def test_empty_baseline_is_fatal(self):
        """Test that an empty or absent baseline raises."""
        with pytest.raises(EmptyBaselineError):
            aggregate(parse_tree({}), self.targets)
        with pytest.raises(EmptyBaselineError):
            Aggregator(self.targets).aggregate(None)

    def test_empty_object_is_a_leaf_row(self):
        """Test that an empty baseline object is counted and classified as a leaf."""
        baseline = parse_tree({"process": {"env": {}, "cwd": "function"}})
        target = parse_tree({"process": {"env": {"HOME": "string"}, "cwd": "function"}})
        result = aggregate(baseline, {"node": target})
        assert [row.to_list() for row in result.rows] == [
            ["process", 2, 2, "1/1/0/0"],
            ["process.env", 0, "supported", "mismatch"],
            ["process.cwd", 0, "supported", "supported"],
        ]
        assert result.leaf_total == 2


class TestTableBuilder:
    """Test table construction and the CSV projection."""

    def setup_method(self):
        self.table = build_table(
            parse_tree(BASELINE),
            {"partial": parse_tree(PARTIAL), "bare": parse_tree(BARE)},
        )

    def test_totals_row_first(self):
        """Test the leading Totals row."""
        rows = self.table.to_rows()
        assert rows[0] == ["Totals", 6, 6, "2/1/3/0", "0/0/0/6"]
        assert rows[1][0] == "buffer"
        assert len(rows) == 11

    def test_baseline_column(self):
        """Test the baseline column of leaf and interior rows."""
        for row in self.table.to_rows()[1:]:
            if row[1] == 0:
                assert row[2] == "supported"
            else:
                assert row[2] == row[1]

    def test_csv_projection(self):
        """Test the CSV header, version row and leaf rows."""
        csv_rows = self.table.to_csv_rows({"partial": "3.2.1"})
        assert csv_rows[0] == ["Module", "Path", "baseline", "partial", "bare"]
        assert csv_rows[1] == ["", "", "", "3.2.1", ""]
        assert csv_rows[2] == ["buffer", "Buffer", "supported", "supported", "unsupported"]
        assert csv_rows[3] == [
            "buffer", "constants.MAX_LENGTH", "supported", "supported", "unsupported"
        ]
        assert len(csv_rows) == 2 + 6

    def test_csv_splits_on_first_separator(self):
        """Test that the module column holds everything before the first dot."""
        modules = [row[0] for row in self.table.to_csv_rows()[2:]]
        paths = [row[1] for row in self.table.to_csv_rows()[2:]]
        assert modules == ["buffer"] * 4 + ["fs"] * 2
        assert paths[-1] == "promises.readFile"


class TestSupportPercentage:
    """Test the single-target support percentage."""

    def test_mismatch_counts_as_present(self):
        """Test that supported and mismatched leaves count, mock modules do not."""
        summary = percentage(parse_tree(BASELINE), parse_tree(PARTIAL))
        assert summary.total_apis == 6
        assert summary.supported_apis == 3
        assert summary.support_percentage == 50.0

    def test_three_quarters(self):
        """Test 150 of 200 supported APIs."""
        baseline = {"util": {f"fn{i}": "function" for i in range(200)}}
        target_util = {}
        for i in range(200):
            if i < 140:
                target_util[f"fn{i}"] = "function"
            elif i < 150:
                target_util[f"fn{i}"] = "string"
            else:
                target_util[f"fn{i}"] = "missing"

        summary = percentage(parse_tree(baseline), parse_tree({"util": target_util}))
        assert summary.total_apis == 200
        assert summary.supported_apis == 150
        assert summary.support_percentage == 75.0
        assert summary.to_dict() == {
            "totalApis": 200,
            "supportedApis": 150,
            "supportPercentage": 75.0,
        }

    def test_one_decimal_rounding(self):
        """Test rounding to one decimal with halves rounded up."""
        baseline = {"util": {f"fn{i}": "function" for i in range(16)}}
        target = {"util": {"fn0": "function"}}
        assert percentage(parse_tree(baseline), parse_tree(target)).support_percentage == 6.3

        baseline = {"util": {"a": "function", "b": "function", "c": "function"}}
        target = {"util": {"a": "function", "b": "function"}}
        assert percentage(parse_tree(baseline), parse_tree(target)).support_percentage == 66.7

    def test_empty_baseline_is_fatal(self):
        """Test that a baseline without leaves cannot produce a percentage."""
        with pytest.raises(EmptyBaselineError):
            percentage(parse_tree({}), parse_tree(PARTIAL))
