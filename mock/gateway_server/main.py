from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, Optional

app = FastAPI(title="Mock Payment Gateway", version="1.0.0")

# reference -> initialized transaction
TRANSACTIONS: Dict[str, Dict[str, Any]] = {}


class InitializeBody(BaseModel):
    email: str
    amount: int
    reference: str
    metadata: Optional[Dict[str, Any]] = None


@app.get("/health")
def health(): return {"status": "ok"}


@app.post("/transaction/initialize")
def initialize(body: InitializeBody):
    if body.reference in TRANSACTIONS:
        raise HTTPException(status_code=400, detail="duplicate reference")
    # Customers whose email contains "decline" never complete payment
    outcome = "failed" if "decline" in body.email else "success"
    TRANSACTIONS[body.reference] = {"amount": body.amount, "status": outcome, "metadata": body.metadata}
    return {
        "status": True,
        "message": "Authorization URL created",
        "data": {
            "authorization_url": f"http://localhost:8003/checkout/{body.reference}",
            "reference": body.reference,
        },
    }


@app.get("/transaction/verify/{reference}")
def verify(reference: str):
    txn = TRANSACTIONS.get(reference)
    if txn is None:
        raise HTTPException(status_code=404, detail="transaction not found")
    return {
        "status": True,
        "message": "Verification successful",
        "data": {"reference": reference, "status": txn["status"], "amount": txn["amount"], "channel": "card"},
    }
