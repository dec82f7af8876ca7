from ticketing.services import intent_parser
from ticketing.services.intent_parser import (
    CLARIFY_EVENT_MESSAGE,
    GREETING_MESSAGE,
    HELP_MESSAGE,
    fallback_parse,
)


def test_book_with_count_and_for_clause():
    intent = fallback_parse("Book 2 tickets for Jazz Night")
    assert intent.kind == "book"
    assert intent.event_name_query == "jazz night"
    assert intent.requested_tickets == 2
    assert intent.source == "fallback"


def test_greeting_wins_over_booking():
    intent = fallback_parse("hello, I want to book tickets")
    assert intent.kind == "greeting"
    assert intent.response == GREETING_MESSAGE


def test_greeting_must_be_a_whole_word():
    assert fallback_parse("history of jazz").kind != "greeting"


def test_view_requests():
    for text in (
        "show me events",
        "Can I see the list of concerts?",
        "What's available this week?",
        "which tickets are available",
        "events available",
        "book 2 tickets for the comedy show",
        "which shows are available",
    ):
        assert fallback_parse(text).kind == "view", text


def test_quoted_event_name():
    intent = fallback_parse("Reserve 3 seats for 'Rock Fest' please")
    assert intent.kind == "book"
    assert intent.event_name_query == "rock fest"
    assert intent.requested_tickets == 3


def test_double_quoted_event_name_keeps_punctuation():
    intent = fallback_parse('buy tickets for "AI Tech Expo: 2030"')
    assert intent.event_name_query == "ai tech expo: 2030"
    assert intent.requested_tickets == 1


def test_to_clause_skips_booking_verbs_and_trailing_noun():
    intent = fallback_parse("I'd like to buy two tickets to the jazz concert")
    assert intent.kind == "book"
    assert intent.event_name_query == "jazz"
    assert intent.requested_tickets == 2


def test_trailing_filler_is_dropped():
    intent = fallback_parse("book 4 tickets for comedy club please")
    assert intent.event_name_query == "comedy club"
    assert intent.requested_tickets == 4


def test_leftover_words_name_the_event():
    intent = fallback_parse("book jazz night")
    assert intent.kind == "book"
    assert intent.event_name_query == "jazz night"
    assert intent.requested_tickets == 1


def test_booking_without_event_asks_which_one():
    intent = fallback_parse("I want to book 2 tickets")
    assert intent.kind == "chat"
    assert intent.response == CLARIFY_EVENT_MESSAGE


def test_unrelated_text_gets_help():
    intent = fallback_parse("what is the weather like")
    assert intent.kind == "chat"
    assert intent.response == HELP_MESSAGE


def test_ticket_count_needs_a_ticket_noun():
    assert intent_parser.extract_ticket_count("book tickets for 2030 expo") == 1
    assert intent_parser.extract_ticket_count("five passes please") == 5
    assert intent_parser.extract_ticket_count("0 tickets") == 0
