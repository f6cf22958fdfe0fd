SYSTEM_PROMPT = (
    "You are an AI assistant that helps people find information. "
    "Provide concise answers that are polite and professional."
)

SUMMARIZE_PROMPT = (
    "Summarize this prompt in one or two words to use as a label in a button on a web page. "
    "Do not use any punctuation."
)
