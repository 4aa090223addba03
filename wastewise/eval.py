# wastewise/eval.py
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd
from loguru import logger

from .catalog_build import load_concepts
from .classify import run_classification
from .config import Concept
from .utils.text_clean import clean_query_text

# ---------- IO helpers ----------

def _read_any(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    ext = path.suffix.lower()
    if ext in [".xlsx", ".xls"]:
        df = pd.read_excel(path)
    else:
        df = pd.read_csv(path, encoding="utf-8")
    cols = {c.lower(): c for c in df.columns}
    qcol, ccol = cols.get("query"), cols.get("expected_concept")
    if not qcol or not ccol:
        raise ValueError(
            f"Expected columns 'Query' and 'Expected_concept'. Found: {list(df.columns)}"
        )
    df = df.rename(columns={qcol: "Query", ccol: "Expected_concept"})
    df["Query"] = df["Query"].fillna("").astype(str).map(clean_query_text)
    df["Expected_concept"] = df["Expected_concept"].astype(str).str.strip()
    return df[df["Query"] != ""].reset_index(drop=True)

# ---------- metrics ----------

def recall_at_k(expected: str, predicted_ids: Sequence[str], k: int) -> float:
    return 1.0 if expected in list(predicted_ids)[:k] else 0.0


def run_predictions(df: pd.DataFrame, concepts: Sequence[Concept]) -> pd.DataFrame:
    """
    Classify every query in ``df`` and attach the top concept id, ranked
    ids, category and confidence.
    """
    rows: List[Dict] = []
    for query, expected in zip(df["Query"], df["Expected_concept"]):
        result = run_classification(query, concepts)
        rows.append(
            {
                "Query": query,
                "Expected_concept": expected,
                "Predicted_concept": result.concept_id or "",
                "Ranked": [m.concept_id for m in result.top_matches],
                "Category": result.category.value,
                "Confidence": result.confidence,
            }
        )
    return pd.DataFrame(rows)


def evaluate(preds: pd.DataFrame, ks=(1, 3, 5)) -> Dict[str, float]:
    """
    preds: output of run_predictions.
    Returns accuracy@1, recall@k and mean confidence for hits vs misses.
    """
    if preds.empty:
        out = {f"recall@{k}": 0.0 for k in ks}
        out.update({"accuracy": 0.0, "mean_conf_hit": 0.0, "mean_conf_miss": 0.0})
        return out

    hit = preds["Predicted_concept"] == preds["Expected_concept"]
    out: Dict[str, float] = {"accuracy": float(hit.mean())}
    for k in ks:
        out[f"recall@{k}"] = float(
            preds.apply(lambda r: recall_at_k(r["Expected_concept"], r["Ranked"], k), axis=1).mean()
        )
    out["mean_conf_hit"] = float(preds.loc[hit, "Confidence"].mean()) if hit.any() else 0.0
    out["mean_conf_miss"] = float(preds.loc[~hit, "Confidence"].mean()) if (~hit).any() else 0.0
    return out

# ---------- CLI ----------

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--gold_csv", type=Path, required=True,
                    help="CSV/XLSX with columns Query, Expected_concept")
    ap.add_argument("--concepts_dir", type=Path, default=None,
                    help="Override the concept directory")
    ap.add_argument("--misses_csv", type=Path, default=None,
                    help="Optional path to write misclassified rows")
    ap.add_argument("--k", type=int, nargs="+", default=[1, 3, 5])
    args = ap.parse_args()

    concepts = load_concepts(args.concepts_dir) if args.concepts_dir else load_concepts()
    df = _read_any(args.gold_csv)
    logger.info("Evaluating {} queries against {} concepts", len(df), len(concepts))

    preds = run_predictions(df, concepts)
    scores = evaluate(preds, ks=args.k)

    if args.misses_csv is not None:
        misses = preds[preds["Predicted_concept"] != preds["Expected_concept"]]
        args.misses_csv.parent.mkdir(parents=True, exist_ok=True)
        misses.drop(columns=["Ranked"]).to_csv(args.misses_csv, index=False, encoding="utf-8")

    print(f"Accuracy@1: {scores['accuracy']:.4f}")
    for k in args.k:
        print(f"Recall@{k}: {scores[f'recall@{k}']:.4f}")
    print(f"Mean confidence (hits): {scores['mean_conf_hit']:.4f}")
    print(f"Mean confidence (misses): {scores['mean_conf_miss']:.4f}")

if __name__ == "__main__":
    main()
