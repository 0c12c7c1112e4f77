import asyncio

from quizshell import commands
from quizshell.errors import ChannelClosed
from quizshell.models import Quiz
from quizshell.store import QuizStore


def _run(command, store: QuizStore, conversation, arg: str | None = None) -> None:
    asyncio.run(command(store, conversation.channel, arg))


def _assert_rearmed(conversation) -> None:
    conversation.replies.append("")
    asyncio.run(conversation.channel.readline())
    assert conversation.prompts[-1] == "quiz > "


def test_help_lists_commands_and_rearms(store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.help_cmd, store, conversation)
    assert conversation.outputs[0] == "Comandos:"
    assert conversation.has("p|play")
    assert conversation.has("q|quit")
    _assert_rearmed(conversation)


def test_list_shows_ids_and_questions(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.list_cmd, seeded_store, conversation)
    assert conversation.outputs == [
        " [1]: Capital de Italia",
        " [2]: Capital de Francia",
        " [3]: Capital de España",
        " [4]: Capital de Portugal",
    ]
    _assert_rearmed(conversation)


def test_show_quiz(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.show_cmd, seeded_store, conversation, "1")
    assert conversation.outputs == [" [1]: Capital de Italia => Roma"]
    _assert_rearmed(conversation)


def test_show_errors_are_reported_and_rearm(seeded_store: QuizStore, scripted) -> None:
    cases = {
        None: "Falta el parámetro <id>.",
        "abc": "El valor del parámetro <id> no es un número.",
        "99": "No existe un quiz asociado al id=99.",
        "99999999999999999999": "No existe un quiz asociado al id=99999999999999999999.",
    }
    for arg, message in cases.items():
        conversation = scripted()
        _run(commands.show_cmd, seeded_store, conversation, arg)
        assert conversation.outputs == [f"Error: {message}"]
        _assert_rearmed(conversation)


def test_add_prompts_question_then_answer(store: QuizStore, scripted) -> None:
    conversation = scripted(["Q", "A"])
    _run(commands.add_cmd, store, conversation)
    assert conversation.prompts == [" Introduzca una pregunta: ", " Introduzca la respuesta: "]
    created = store.find_all()
    assert len(created) == 1
    assert conversation.outputs == [" Se ha añadido: Q => A"]

    shown = scripted()
    _run(commands.show_cmd, store, shown, str(created[0].id))
    assert shown.outputs == [f" [{created[0].id}]: Q => A"]


def test_add_empty_question_reports_field_errors(store: QuizStore, scripted) -> None:
    conversation = scripted(["", ""])
    _run(commands.add_cmd, store, conversation)
    assert conversation.outputs == [
        "Error: El quiz es erroneo: ",
        "Error: La pregunta no puede estar vacía",
        "Error: La respuesta no puede estar vacía",
    ]
    assert store.count() == 0
    _assert_rearmed(conversation)


def test_add_duplicate_question_creates_nothing(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted(["Capital de Italia", "Roma"])
    _run(commands.add_cmd, seeded_store, conversation)
    assert conversation.has("Ya existe esta pregunta")
    assert seeded_store.count() == 4


def test_add_aborted_by_closed_channel_writes_nothing(store: QuizStore, scripted) -> None:
    conversation = scripted(["Q"])
    try:
        _run(commands.add_cmd, store, conversation)
        raise AssertionError("Expected ChannelClosed.")
    except ChannelClosed:
        pass
    assert store.count() == 0
    assert conversation.outputs == []


def test_generic_store_failure_is_reported(store: QuizStore, scripted) -> None:
    def broken(question: str, answer: str) -> Quiz:
        raise RuntimeError("disk I/O error")

    store.create = broken  # type: ignore[method-assign]
    conversation = scripted(["Q", "A"])
    _run(commands.add_cmd, store, conversation)
    assert conversation.outputs == ["Error: disk I/O error"]
    _assert_rearmed(conversation)


def test_delete_quiz(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.delete_cmd, seeded_store, conversation, "2")
    assert conversation.outputs == []
    assert seeded_store.find_by_id(2) is None
    assert seeded_store.count() == 3
    _assert_rearmed(conversation)


def test_delete_missing_quiz_is_not_found(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.delete_cmd, seeded_store, conversation, "99")
    assert conversation.outputs == ["Error: No existe un quiz asociado al id=99."]
    assert seeded_store.count() == 4


def test_delete_id_beyond_integer_range_is_not_found(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.delete_cmd, seeded_store, conversation, "-99999999999999999999")
    assert conversation.outputs == ["Error: No existe un quiz asociado al id=-99999999999999999999."]
    assert seeded_store.count() == 4
    _assert_rearmed(conversation)


def test_edit_replaces_question_and_answer(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted(["X", "Y"])
    _run(commands.edit_cmd, seeded_store, conversation, "1")
    assert conversation.prompts == [" Introduzca la pregunta: ", " Introduzca la respuesta: "]
    assert conversation.outputs == [" Se ha cambiado el quiz 1 por: X => Y"]
    assert seeded_store.find_by_id(1) == Quiz(id=1, question="X", answer="Y")

    shown = scripted()
    _run(commands.show_cmd, seeded_store, shown, "1")
    assert shown.outputs == [" [1]: X => Y"]


def test_edit_duplicate_question_keeps_record(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted(["Capital de Francia", "Roma"])
    _run(commands.edit_cmd, seeded_store, conversation, "1")
    assert conversation.outputs == ["Error: El quiz es erroneo: ", "Error: Ya existe esta pregunta"]
    assert seeded_store.find_by_id(1) == Quiz(id=1, question="Capital de Italia", answer="Roma")
    _assert_rearmed(conversation)


def test_edit_missing_quiz_does_not_prompt(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.edit_cmd, seeded_store, conversation, "99")
    assert conversation.prompts == []
    assert conversation.outputs == ["Error: No existe un quiz asociado al id=99."]


def test_edit_reports_quiz_deleted_while_prompting(seeded_store: QuizStore, scripted) -> None:
    class DeletedMidway(scripted):
        def _input(self, prompt: str) -> str:
            reply = super()._input(prompt)
            seeded_store.destroy(1)
            return reply

    conversation = DeletedMidway(["X", "Y"])
    _run(commands.edit_cmd, seeded_store, conversation, "1")
    assert conversation.prompts == [" Introduzca la pregunta: ", " Introduzca la respuesta: "]
    assert conversation.outputs == ["Error: No existe un quiz asociado al id=1."]
    assert seeded_store.find_by_id(1) is None
    _assert_rearmed(conversation)


def test_test_correct_answer_ignores_case_and_blanks(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted([" roma "])
    _run(commands.test_cmd, seeded_store, conversation, "1")
    assert conversation.prompts == ["Capital de Italia? "]
    assert conversation.outputs[0] == "CORRECTO"
    assert "CORRECTO" in conversation.outputs[1]
    assert conversation.outputs[1] != "CORRECTO"
    _assert_rearmed(conversation)


def test_test_wrong_answer(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted(["Madrid"])
    _run(commands.test_cmd, seeded_store, conversation, "1")
    assert conversation.outputs[0] == "INCORRECTO"
    assert seeded_store.count() == 4


def test_test_missing_quiz(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.test_cmd, seeded_store, conversation, "99")
    assert conversation.outputs == ["Error: No existe un quiz asociado al id=99."]
    assert conversation.prompts == []


def test_play_rearms_after_game(seeded_store: QuizStore, scripted) -> None:
    conversation = scripted(["nope"])
    _run(commands.make_play_cmd(lambda: 0.0), seeded_store, conversation)
    assert conversation.has("INCORRECTO.")
    _assert_rearmed(conversation)


def test_credits(store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.credits_cmd, store, conversation)
    assert conversation.outputs[0] == "Autores de la práctica:"
    assert len(conversation.outputs) == 1 + len(commands.AUTHORS)
    _assert_rearmed(conversation)


def test_quit_closes_without_rearming(store: QuizStore, scripted) -> None:
    conversation = scripted()
    _run(commands.quit_cmd, store, conversation)
    assert conversation.channel.closed is True
    try:
        asyncio.run(conversation.channel.readline())
        raise AssertionError("Expected ChannelClosed.")
    except ChannelClosed:
        pass
    assert conversation.prompts == []
