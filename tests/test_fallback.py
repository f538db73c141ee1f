from __future__ import annotations

import pytest

from services.fallback import FallbackChain, ProviderGroup
from services.rotation import RotationCursor
from tests.fakes import ScriptedTranslator


async def test_cascade_reaches_second_key_of_next_group():
    a = ScriptedTranslator("A")
    b0 = ScriptedTranslator("B", 0)
    b1 = ScriptedTranslator("B", 1, text="Přeloženo")
    chain = FallbackChain([ProviderGroup("A", (a,)), ProviderGroup("B", (b0, b1))])

    result = await chain.translate("Translated", "cs", "en")

    assert result.success
    assert result.text == "Přeloženo"
    assert result.provider == "B"
    assert (a.calls, b0.calls, b1.calls) == (1, 1, 1)


async def test_primary_group_gets_one_attempt_before_cascade():
    a0 = ScriptedTranslator("A", 0, error=RuntimeError("quota"))
    a1 = ScriptedTranslator("A", 1, text="z A1")
    b = ScriptedTranslator("B", text="z B")
    chain = FallbackChain([ProviderGroup("A", (a0, a1)), ProviderGroup("B", (b,))])

    result = await chain.translate("text", "cs")

    assert result.text == "z B"
    assert (a0.calls, a1.calls, b.calls) == (1, 0, 1)


async def test_starting_group_other_keys_are_never_tried():
    a0 = ScriptedTranslator("A", 0)
    a1 = ScriptedTranslator("A", 1, text="z A1")
    b = ScriptedTranslator("B")
    chain = FallbackChain([ProviderGroup("A", (a0, a1)), ProviderGroup("B", (b,))])

    result = await chain.translate("text", "cs")

    assert not result.success
    assert result.error == "All providers failed. Attempted: A[0], B[0]"
    assert (a0.calls, b.calls, a1.calls) == (1, 1, 0)


async def test_single_group_chain_makes_one_attempt():
    a0 = ScriptedTranslator("A", 0)
    a1 = ScriptedTranslator("A", 1, text="z A1")
    chain = FallbackChain([ProviderGroup("A", (a0, a1))])

    first = await chain.translate("text", "cs")
    assert not first.success
    assert (a0.calls, a1.calls) == (1, 0)

    # The group cursor moves on, so the next call starts on the other key
    second = await chain.translate("text", "cs")
    assert second.text == "z A1"
    assert (a0.calls, a1.calls) == (1, 1)


async def test_provider_cursor_rotates_starting_group():
    a = ScriptedTranslator("A", text="a")
    b = ScriptedTranslator("B", text="b")
    chain = FallbackChain([ProviderGroup("A", (a,)), ProviderGroup("B", (b,))], RotationCursor())

    first = await chain.translate("x", "cs")
    second = await chain.translate("x", "cs")

    assert (first.text, second.text) == ("a", "b")


async def test_exhaustion_lists_attempts():
    chain = FallbackChain([ProviderGroup("A", (ScriptedTranslator("A"),))])

    result = await chain.translate("x", "cs")

    assert not result.success
    assert result.error == "All providers failed. Attempted: A[0]"


async def test_empty_text_and_empty_chain():
    translator = ScriptedTranslator("A", text="a")
    chain = FallbackChain([ProviderGroup("A", (translator,))])

    assert (await chain.translate("  ", "cs")).error == "Empty text"
    assert translator.calls == 0
    assert (await FallbackChain([]).translate("x", "cs")).error == "No providers configured"


def test_group_requires_translators():
    with pytest.raises(ValueError):
        ProviderGroup("A", ())
