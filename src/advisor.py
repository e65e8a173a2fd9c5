"""
boundary to an optional natural language advisor

the engine only hands out a text snapshot and passes the answer through,
nothing returned here ever touches the game state. the actual client (an
llm api or anything else) is injected as a callable prompt -> text
"""
from game import board_to_text, validate_board


NEUTRAL_ADVICE = "No advice available right now. The suggestion is not authoritative, trust the board."

PROMPT_TEMPLATE = """You are a grandmaster at the game 2048. Analyze the current board state below.
Zeros represent empty cells.

{board}

Task:
1. Recommend the single best move (Up, Down, Left, or Right).
2. Briefly explain the strategic reasoning.
3. Keep the advice concise (under 50 words).

Response Format:
Move: [Direction]
Reason: [Explanation]
"""


def build_prompt(board):
    return PROMPT_TEMPLATE.format(board=board_to_text(validate_board(board)))


def get_advice(board, ask):
    """
    ask the advisor about the board

    args:
        board: current board
        ask: callable taking the prompt text and returning free text

    returns the advisor's text, or NEUTRAL_ADVICE when the advisor fails
    or answers nothing
    """
    prompt = build_prompt(board)
    try:
        answer = ask(prompt)
    except Exception as e:
        print(f"Advisor error: {e}")
        return NEUTRAL_ADVICE

    if not answer or not str(answer).strip():
        return NEUTRAL_ADVICE
    return str(answer).strip()
