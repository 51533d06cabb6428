# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the module override conflict checker."""

import os
from pathlib import Path

import pytest

from mocs.checker import (
    CONFLICT_MESSAGE,
    ModuleOverrideChecker,
    OverrideScanError,
    scan_overrides,
)
from mocs.config import CheckerConfig
from mocs.conflict import MemberCollision
from mocs.translator import IdentityTranslator, PositionalTranslator

RUN_METHOD_SOURCE = "<?php\nclass C { public function run() {} }\n"


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _layout(tmp_path: Path) -> tuple[Path, Path, str]:
    module_dir = tmp_path / "modules" / "demo" / "override"
    existing_dir = tmp_path / "override"
    existing_dir.mkdir(parents=True)
    return module_dir, existing_dir, str(existing_dir) + os.sep


def _checker(override_dir: str, **config: str) -> ModuleOverrideChecker:
    return ModuleOverrideChecker(
        translator=PositionalTranslator(),
        override_dir=override_dir,
        config=CheckerConfig(**config),  # type: ignore[arg-type]
    )


def test_ph6_chk_001_missing_module_directory_has_no_conflict(tmp_path: Path) -> None:
    module_dir, _, override_dir = _layout(tmp_path)
    checker = _checker(override_dir)

    assert checker.has_override_conflict(module_dir) is False
    assert checker.get_errors() == []


def test_ph6_chk_002_directory_without_override_files_has_no_conflict(
    tmp_path: Path,
) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "classes" / "notes.txt", "class C { public $a; }")
    _write_file(existing_dir / "classes" / "notes.txt", "class C { public $a; }")
    checker = _checker(override_dir)

    result = checker.scan(module_dir)

    assert result.has_conflict is False
    assert result.files_scanned == 0
    assert checker.has_override_conflict(module_dir) is False


def test_ph6_chk_003_same_method_in_both_overrides_is_reported(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "A.php", RUN_METHOD_SOURCE)
    _write_file(existing_dir / "A.php", RUN_METHOD_SOURCE)
    checker = _checker(override_dir)

    assert checker.has_override_conflict(module_dir) is True

    candidate_path = str(module_dir) + os.sep + "A.php"
    existing_path = override_dir + "A.php"
    assert checker.get_errors() == [
        f"The override file {candidate_path} conflicts with an existing override "
        f"in {existing_path}."
    ]


def test_ph6_chk_004_different_constants_do_not_conflict(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "B.php", "<?php\nclass C { const X = 1; }\n")
    _write_file(existing_dir / "B.php", "<?php\nclass C { const Y = 2; }\n")
    checker = _checker(override_dir)

    assert checker.has_override_conflict(module_dir) is False
    assert checker.get_errors() == []


def test_ph6_chk_005_same_class_property_is_reported(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "C.php", "<?php\nclass C { public $count = 0; }\n")
    _write_file(existing_dir / "C.php", "<?php\nclass C { protected $count; }\n")
    checker = _checker(override_dir)

    result = checker.scan(module_dir)

    assert result.has_conflict is True
    assert result.conflicts[0].collisions == (
        MemberCollision(member_kind="property", name="$count"),
    )


def test_ph6_chk_006_missing_counterpart_is_skipped(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "classes" / "Cart.php", RUN_METHOD_SOURCE)
    _write_file(existing_dir / "classes" / "Product.php", RUN_METHOD_SOURCE)
    checker = _checker(override_dir)

    result = checker.scan(module_dir)

    assert result.files_scanned == 1
    assert result.pairs_compared == 0
    assert result.has_conflict is False


def test_ph6_chk_007_repeated_scans_do_not_accumulate_errors(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "A.php", RUN_METHOD_SOURCE)
    _write_file(existing_dir / "A.php", RUN_METHOD_SOURCE)
    checker = _checker(override_dir)

    assert checker.has_override_conflict(module_dir) is True
    first_errors = checker.get_errors()
    assert checker.has_override_conflict(module_dir) is True

    assert checker.get_errors() == first_errors
    assert len(first_errors) == 1


def test_ph6_chk_008_errors_reflect_only_the_latest_module(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    clean_module_dir = tmp_path / "modules" / "clean" / "override"
    _write_file(module_dir / "A.php", RUN_METHOD_SOURCE)
    _write_file(existing_dir / "A.php", RUN_METHOD_SOURCE)
    _write_file(clean_module_dir / "A.php", "<?php\nclass C { public function stop() {} }")
    checker = _checker(override_dir)

    assert checker.has_override_conflict(module_dir) is True
    assert checker.has_override_conflict(clean_module_dir) is False
    assert checker.get_errors() == []


def test_ph6_chk_009_reports_one_message_per_conflicting_file_in_path_order(
    tmp_path: Path,
) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    for relative in ("controllers/front/OrderController.php", "classes/Cart.php"):
        _write_file(module_dir / relative, RUN_METHOD_SOURCE)
        _write_file(existing_dir / relative, RUN_METHOD_SOURCE)
    _write_file(module_dir / "classes" / "Product.php", "<?php class P { const A = 1; }")
    _write_file(existing_dir / "classes" / "Product.php", "<?php class P { const B = 1; }")
    checker = _checker(override_dir)

    result = checker.scan(module_dir)

    assert result.files_scanned == 3
    assert result.pairs_compared == 3
    assert [conflict.existing_path for conflict in result.conflicts] == [
        override_dir + os.path.join("classes", "Cart.php"),
        override_dir + os.path.join("controllers", "front", "OrderController.php"),
    ]


def test_ph6_chk_010_unreadable_override_aborts_scan(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "A.php", RUN_METHOD_SOURCE)
    (existing_dir / "A.php").mkdir()
    checker = _checker(override_dir)

    with pytest.raises(OverrideScanError):
        checker.has_override_conflict(module_dir)
    assert checker.get_errors() == []


def test_ph6_chk_011_constructor_requires_trailing_separator(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        ModuleOverrideChecker(
            translator=IdentityTranslator(), override_dir=str(tmp_path / "override")
        )


def test_ph6_chk_012_brace_depth_strategy_avoids_leaked_local_conflict(
    tmp_path: Path,
) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(
        module_dir / "Foo.php",
        """<?php
class Foo {
    public function run() {
        if (true) {
            $x = 1;
        }
        $leaked = 2;
    }
}
""",
    )
    _write_file(existing_dir / "Foo.php", "<?php\nclass Foo { public $leaked; }\n")

    assert _checker(override_dir).has_override_conflict(module_dir) is True
    assert (
        _checker(override_dir, scope_strategy="brace_depth").has_override_conflict(
            module_dir
        )
        is False
    )


def test_ph6_chk_013_scan_overrides_returns_caller_owned_result(
    tmp_path: Path,
) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "A.php", RUN_METHOD_SOURCE)
    _write_file(existing_dir / "A.php", RUN_METHOD_SOURCE)

    result = scan_overrides(
        module_dir, override_dir, translator=IdentityTranslator()
    )

    assert result.errors == [CONFLICT_MESSAGE]
    assert result.conflicts[0].candidate_path == str(module_dir) + os.sep + "A.php"


def test_ph6_chk_014_malformed_overrides_never_raise(tmp_path: Path) -> None:
    module_dir, existing_dir, override_dir = _layout(tmp_path)
    _write_file(module_dir / "A.php", '<?php class { function ( "open $x')
    _write_file(existing_dir / "A.php", "<?php /* never closed")
    (module_dir / "Bin.php").write_bytes(b"<?php class C { public $\xff\xfe; }")
    (existing_dir / "Bin.php").write_bytes(b"<?php class C { public $\xff\xfe; }")

    result = _checker(override_dir).scan(module_dir)

    assert result.pairs_compared == 2
    assert [conflict.candidate_path for conflict in result.conflicts] == [
        str(module_dir) + os.sep + "Bin.php"
    ]
