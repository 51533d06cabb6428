# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from mocs.checker import CONFLICT_MESSAGE, MESSAGE_DOMAIN
from mocs.translator import IdentityTranslator, PositionalTranslator


def test_ph4_trn_001_positional_translator_fills_numbered_placeholders() -> None:
    message = PositionalTranslator().trans(
        CONFLICT_MESSAGE, ["a/Cart.php", "b/Cart.php"], MESSAGE_DOMAIN
    )

    assert message == (
        "The override file a/Cart.php conflicts with an existing override in b/Cart.php."
    )


def test_ph4_trn_002_positional_translator_supports_reordering_and_bare_s() -> None:
    translator = PositionalTranslator()

    assert translator.trans("%2$s before %1$s", ["one", "two"], "d") == "two before one"
    assert translator.trans("%s then %s", ["one", "two"], "d") == "one then two"
    assert translator.trans("100%% of %s", ["runs"], "d") == "100% of runs"


def test_ph4_trn_003_missing_parameters_leave_placeholders_untouched() -> None:
    translator = PositionalTranslator()

    assert translator.trans("%1$s and %3$s", ["one"], "d") == "one and %3$s"


def test_ph4_trn_004_identity_translator_returns_template() -> None:
    assert (
        IdentityTranslator().trans(CONFLICT_MESSAGE, ["a", "b"], MESSAGE_DOMAIN)
        == CONFLICT_MESSAGE
    )
