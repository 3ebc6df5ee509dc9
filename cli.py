#!/usr/bin/env python3
import argparse, json, logging, sys
from pathlib import Path

from range_pipeline import (
    PipelineConfig, load_config_yaml, RangePipeline, RangePipelineError, load_almanac,
    merge_intervals, plot_stage_intervals, save_intervals_json, save_stages_json, total_length
)

log = logging.getLogger("range_pipeline.cli")

def build_argparser():
    ap = argparse.ArgumentParser(description="Range-rewriting pipeline over almanac maps")
    ap.add_argument("almanac", type=str, help="Almanac text file (seeds line followed by X-to-Y map blocks)")
    ap.add_argument("--config", type=str, default="", help="YAML config file (optional)")
    ap.add_argument("--output-dir", type=str, default="outputs", help="Directory to store results")
    ap.add_argument("--workers", type=int, default=0, help="Override number of parallel workers")
    ap.add_argument("--executor", choices=["process", "thread"], default=None, help="Override executor kind")
    ap.add_argument("--no-reduce", action="store_true", help="Do not merge the working set between stages")
    ap.add_argument("--no-merge-adjacent", action="store_true", help="Keep touching intervals separate")
    ap.add_argument("--no-validate", action="store_true", help="Skip rule overlap validation")
    ap.add_argument("--plot", action="store_true", help="Show the per-stage plot interactively")
    ap.add_argument("--save-plots", action="store_true", help="Save the per-stage plot as PNG in output-dir")
    ap.add_argument("--write-stages", action="store_true", help="Save per-stage interval sets as JSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap

def _apply_overrides(cfg: PipelineConfig, args) -> PipelineConfig:
    if args.workers > 0:
        cfg.parallel.workers = args.workers
    if args.executor:
        cfg.parallel.executor = args.executor
    if args.no_reduce:
        cfg.reducer.enabled = False
    if args.no_merge_adjacent:
        cfg.reducer.merge_adjacent = False
    if args.no_validate:
        cfg.validate_tables = False
    return cfg.validate()

def run(args) -> dict:
    out_dir = Path(args.output_dir); out_dir.mkdir(parents=True, exist_ok=True)

    if args.config:
        cfg = load_config_yaml(args.config)
    else:
        cfg = PipelineConfig()
    cfg = _apply_overrides(cfg, args)

    almanac = load_almanac(args.almanac)
    pipe = RangePipeline.from_almanac(almanac, cfg)
    seed_ranges = almanac.seed_ranges()

    point_min = pipe.minimum_point_value(almanac.seeds) if almanac.seeds else None
    tracing = args.write_stages or args.save_plots or args.plot
    res = pipe.trace(seed_ranges) if tracing else None
    final = res.final if res is not None else pipe.apply(seed_ranges)
    range_min = final[0].start if final else None

    save_intervals_json(final, out_dir / "final_intervals.json")

    if res is not None:
        stage_sets = {"seeds": merge_intervals(seed_ranges)}
        stage_sets.update(res.stage_intervals)
        if args.write_stages:
            save_stages_json(stage_sets, out_dir / "stages.json")
        if args.save_plots or args.plot:
            plot_stage_intervals(
                stage_sets,
                title="Working interval set per stage",
                show=args.plot,
                save_path=str(out_dir / "plot_stages.png") if args.save_plots else None
            )

    summary = {
        "stages": len(pipe),
        "seed_ranges": len(seed_ranges),
        "seed_values": total_length(seed_ranges),
        "final_intervals": len(final),
        "final_values": total_length(final),
        "point_minimum": point_min,
        "range_minimum": range_min,
    }
    (out_dir / "summary.json").write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")
    return summary

def main(argv=None):
    args = build_argparser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        summary = run(args)
    except (RangePipelineError, OSError) as e:
        log.error("%s", e)
        return 1
    print(json.dumps(summary))
    return 0

if __name__ == "__main__":
    sys.exit(main())
