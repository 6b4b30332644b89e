#!/usr/bin/env python3
"""
Seed script feeding a sample contest snapshot through ingestion

Values can be overridden with SEED_* environment variables.
"""
import asyncio
import json
import os

from showdown_vote.db.session import AsyncSessionLocal
from showdown_vote.services.ingestion import ingest_snapshot

CONTEST_ID = "a03TESTCONTEST0001"
SHOWDOWN_ID = "a07TESTSHOWDOWN001"
RED_COUPLE_ID = "a04TESTCOUPLE00001"
BLUE_COUPLE_ID = "a04TESTCOUPLE00002"


def build_snapshot() -> dict:
    """Salesforce-shaped snapshot describing one contest with one open showdown"""
    current_round = os.getenv("SEED_CURRENT_ROUND", "Finals")
    return {
        "contest": {
            "attributes": {"type": "Contest__c"},
            "Id": CONTEST_ID,
            "Name": os.getenv("SEED_CONTEST_NAME", "Test Contest"),
            "Status__c": os.getenv("SEED_CONTEST_STATUS", "ROUND_ACTIVE"),
            "Current_Round__c": current_round,
            "Active_Showdown__c": SHOWDOWN_ID,
            "Judging_Model__c": os.getenv("SEED_JUDGING_MODEL", "Judges_And_Audience"),
            "Judge_Panel_Size__c": os.getenv("SEED_JUDGE_PANEL_SIZE", "3"),
            "Results_Visibility__c": os.getenv("SEED_RESULTS_VISIBILITY", "PUBLIC"),
        },
        "activeShowdown": {
            "Id": SHOWDOWN_ID,
            "Contest__c": CONTEST_ID,
            "Name": os.getenv("SEED_SHOWDOWN_NAME", "Match 1"),
            "Status__c": os.getenv("SEED_SHOWDOWN_STATUS", "VOTING_OPEN"),
            "Round__c": os.getenv("SEED_SHOWDOWN_ROUND", current_round),
            "Match_Number__c": 1,
            "Red_Couple__c": RED_COUPLE_ID,
            "Blue_Couple__c": BLUE_COUPLE_ID,
        },
        "pairings": [
            {
                "Id": RED_COUPLE_ID,
                "Contest__c": CONTEST_ID,
                "Lead_Name__c": os.getenv("SEED_RED_LEAD", "Red Lead"),
                "Follow_Name__c": os.getenv("SEED_RED_FOLLOW", "Red Follow"),
            },
            {
                "Id": BLUE_COUPLE_ID,
                "Contest__c": CONTEST_ID,
                "Lead_Name__c": os.getenv("SEED_BLUE_LEAD", "Blue Lead"),
                "Follow_Name__c": os.getenv("SEED_BLUE_FOLLOW", "Blue Follow"),
            },
        ],
    }


async def run():
    """Ingest the sample snapshot"""
    async with AsyncSessionLocal() as session:
        result = await ingest_snapshot(session, build_snapshot())
    print(json.dumps({"contestId": result["contestId"], "showdownId": SHOWDOWN_ID}, indent=2))


if __name__ == "__main__":
    asyncio.run(run())
