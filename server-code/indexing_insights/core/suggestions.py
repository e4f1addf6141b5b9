CLARIFICATION_SUGGESTIONS = (
    "What's the average success rate for Deal1 last month?",
    "Compare indexing performance between Deal1 and Deal2.",
    "Show me failed jobs for Deal3.",
    "Create a table of top performing clients",
    "Display a chart of job volumes by country",
)

UNSUPPORTED_SUGGESTIONS = (
    "Try asking something like:",
    "• Average TOTAL_JOBS_SENT_TO_INDEX for Deal1",
    "• Success rate by client this week",
    "• Show me top clients in a table",
    "• Create a chart of processing volumes",
)

NO_DATA_HINT = "Try changing the date range or choosing a different client."
ERROR_HINT = "Try rephrasing or ask about a specific client's performance."
FORMAT_ERROR_HINT = "Try rephrasing your question or asking for a different format."
