from fastapi import FastAPI, HTTPException, Request
import json
import os
import re

app = FastAPI(title="Mock Summary Server", version="1.0.0")
# MOCK_SUMMARY_MODE: json (default) | fenced | plain | error | quota
MODE = os.environ.get("MOCK_SUMMARY_MODE", "json")

SCORE_PATTERN = re.compile(r"Funding Readiness Score: (\d+)/100")


def _summary_for(prompt: str) -> str:
    match = SCORE_PATTERN.search(prompt)
    score = match.group(1) if match else "unknown"
    return (
        f"The business shows a funding readiness score of {score}/100. "
        "Cash flow and leverage figures above drive this assessment."
    )

@app.get("/health")
def health(): return {"status": "ok"}

@app.post("/v1/chat/completions")
async def chat_completions(request: Request):
    if MODE == "error":
        raise HTTPException(status_code=503, detail="upstream unavailable")
    if MODE == "quota":
        raise HTTPException(status_code=429, detail="rate limited")

    body = await request.json()
    prompt = body["messages"][-1]["content"]
    summary = _summary_for(prompt)

    if MODE == "plain":
        content = summary
    elif MODE == "fenced":
        content = "```json\n" + json.dumps({"aiSummary": summary}) + "\n```"
    else:
        content = json.dumps({"aiSummary": summary})

    return {
        "id": "mock-completion",
        "model": body.get("model", "mock"),
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }
