"""Tests for specification synthesis, manual edits and export."""
import json
import pytest
from unittest.mock import patch, AsyncMock

from specbuilder.errors import GenerationFailed, InvalidGenerationOutput, NotFound
from specbuilder.services import conversation, prompts, store, synthesizer


def spec_reply(**overrides):
    body = {
        "appName": "DueDo",
        "document": {
            "overview": {
                "appName": "DueDo",
                "tagline": "Never miss a deadline",
                "targetUser": "Busy professionals",
                "coreValue": "Tasks with due dates that stay visible",
            },
            "features": {"mustHave": [{"name": "Due dates", "description": "Set a deadline per task"}]},
            "screenFlow": "List -> Detail",
        },
        "buildPrompt": "# DueDo\n\n## Overview\n- **Tagline**: Never miss a deadline",
    }
    body.update(overrides)
    return json.dumps(body)


@pytest.fixture
def conv(db_session):
    db_conv = conversation.create(db_session, owner_id=1)
    store.update_conversation(db_session, db_conv.id, messages=[
        {"role": "user", "content": "I want a todo app", "timestamp": "t1"},
        {"role": "assistant", "content": "What else?", "timestamp": "t2"},
    ])
    return db_conv


class TestSynthesize:

    @pytest.mark.asyncio
    async def test_success_stores_new_row_at_version_one(self, db_session, conv):
        with patch("specbuilder.services.llm_client.generate", new=AsyncMock(return_value=spec_reply())):
            result = await synthesizer.synthesize(db_session, conv.id, 1)

        spec = result["specification"]
        assert spec["appName"] == "DueDo"
        assert spec["document"]["overview"]["tagline"] == "Never miss a deadline"

        stored = synthesizer.get(db_session, result["specification_id"], 1)
        assert stored.version == 1
        assert stored.source_conversation_id == conv.id
        assert stored.app_name == "DueDo"
        assert stored.build_prompt.startswith("# DueDo")
        # Sections outside the overview are kept as they came
        assert stored.document["screenFlow"] == "List -> Detail"

    @pytest.mark.asyncio
    async def test_request_carries_whole_transcript_and_schema(self, db_session, conv):
        mock_generate = AsyncMock(return_value=spec_reply())
        with patch("specbuilder.services.llm_client.generate", new=mock_generate):
            await synthesizer.synthesize(db_session, conv.id, 1)

        messages = mock_generate.call_args.args[0]
        assert messages[0] == {"role": "system", "content": prompts.SYNTHESIS_PROMPT}
        assert json.loads(messages[1]["content"])[0]["content"] == "I want a todo app"
        assert mock_generate.call_args.kwargs["response_format"] == prompts.SPECIFICATION_RESPONSE_FORMAT

    @pytest.mark.asyncio
    async def test_two_calls_make_two_rows(self, db_session, conv):
        with patch("specbuilder.services.llm_client.generate", new=AsyncMock(return_value=spec_reply())):
            first = await synthesizer.synthesize(db_session, conv.id, 1)
            second = await synthesizer.synthesize(db_session, conv.id, 1)

        assert first["specification_id"] != second["specification_id"]
        specs = synthesizer.list_for_owner(db_session, 1)
        assert len(specs) == 2
        assert all(s.version == 1 for s in specs)

    @pytest.mark.asyncio
    async def test_generation_failure_creates_nothing(self, db_session, conv):
        with patch("specbuilder.services.llm_client.generate",
                   new=AsyncMock(side_effect=GenerationFailed("context length exceeded"))):
            with pytest.raises(GenerationFailed):
                await synthesizer.synthesize(db_session, conv.id, 1)

        assert store.count_specifications(db_session, 1) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [
        "not json at all",
        json.dumps({"appName": "A", "buildPrompt": "p"}),
        json.dumps({"appName": "A", "document": {"overview": {"appName": "A", "tagline": "t", "targetUser": "u"}}, "buildPrompt": "p"}),
        json.dumps({"appName": "A", "document": {"overview": {"appName": "A", "tagline": "t", "targetUser": "u", "coreValue": "v"}}}),
        spec_reply(appName="x" * 256),
    ])
    async def test_invalid_output_creates_nothing(self, db_session, conv, raw):
        with patch("specbuilder.services.llm_client.generate", new=AsyncMock(return_value=raw)):
            with pytest.raises(InvalidGenerationOutput):
                await synthesizer.synthesize(db_session, conv.id, 1)

        assert store.count_specifications(db_session, 1) == 0

    @pytest.mark.asyncio
    async def test_foreign_conversation_is_not_found(self, db_session, conv):
        with patch("specbuilder.services.llm_client.generate", new=AsyncMock(return_value=spec_reply())) as mock_generate:
            with pytest.raises(NotFound):
                await synthesizer.synthesize(db_session, conv.id, 2)
            mock_generate.assert_not_called()
        assert store.count_specifications(db_session, 2) == 0


class TestEditAndExport:

    @pytest.fixture
    def spec(self, db_session):
        return store.create_specification(
            db_session, owner_id=1, source_conversation_id=None, app_name="DueDo",
            document={"overview": {"appName": "DueDo"}}, build_prompt="Build DueDo.",
        )

    def test_every_update_bumps_version_by_one(self, db_session, spec):
        synthesizer.update(db_session, spec.id, 1, build_prompt="Build DueDo v2.")
        synthesizer.update(db_session, spec.id, 1, document={"overview": {"appName": "DueDo 2"}})
        updated = synthesizer.update(db_session, spec.id, 1)

        assert updated.version == 4
        assert updated.build_prompt == "Build DueDo v2."
        assert updated.document == {"overview": {"appName": "DueDo 2"}}

    def test_manual_edit_is_not_revalidated(self, db_session, spec):
        updated = synthesizer.update(db_session, spec.id, 1, document={"anything": True})
        assert updated.document == {"anything": True}

    def test_foreign_update_is_not_found(self, db_session, spec):
        with pytest.raises(NotFound):
            synthesizer.update(db_session, spec.id, 2, build_prompt="mine now")
        assert synthesizer.get(db_session, spec.id, 1).version == 1

    def test_export_format(self, spec):
        assert synthesizer.export_build_prompt(spec) == "# DueDo - spec\n\nBuild DueDo.\n"

    def test_export_filename_is_sanitized(self, db_session):
        spec = store.create_specification(db_session, 1, None, "My App / v2", {}, "p")
        assert synthesizer.export_filename(spec) == "My_App_v2-spec.md"


@pytest.mark.asyncio
async def test_todo_app_scenario(db_session):
    """Two chat turns, then synthesis, ends with a stored spec pointing at the conversation."""
    conv = conversation.create(db_session, owner_id=1)

    with patch("specbuilder.services.llm_client.generate",
               new=AsyncMock(side_effect=["Who will use it?", "Got it, anything else?", spec_reply()])):
        await conversation.append_and_respond(db_session, conv.id, 1, "I want a todo app")
        assert len(conversation.get(db_session, conv.id, 1).messages) == 2
        await conversation.append_and_respond(db_session, conv.id, 1, "it needs due dates")
        assert len(conversation.get(db_session, conv.id, 1).messages) == 4

        result = await synthesizer.synthesize(db_session, conv.id, 1)

    spec = result["specification"]
    assert spec["appName"]
    assert isinstance(spec["document"]["overview"]["tagline"], str) and spec["document"]["overview"]["tagline"]
    assert spec["buildPrompt"]
    stored = synthesizer.list_for_owner(db_session, 1)
    assert len(stored) == 1
    assert stored[0].source_conversation_id == conv.id
