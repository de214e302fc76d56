def format_score(score, cfg):
    if abs(score) > -cfg.loss_threshold:
        mate_in = (cfg.mate_value - abs(score) + 1) // 2
        return f"mate {mate_in if score > 0 else -mate_in}"
    return f"cp {score}"


def format_info(result, cfg):
    pv_str = " ".join(m.uci() for m in result.pv)
    nps = int(result.nodes / result.elapsed) if result.elapsed > 0 else 0
    return (f"info depth {result.pv_depth} seldepth {result.max_depth} "
            f"score {format_score(result.value, cfg)} nodes {result.nodes} nps {nps} "
            f"time {int(result.elapsed * 1000)} expansions {result.expansions} "
            f"repairs {result.repairs} pv {pv_str}")
