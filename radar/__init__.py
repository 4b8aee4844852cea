"""Market Radar - news & review intelligence pipeline.

Fetch -> Dedupe -> Noise/Signal filter -> Mega-batch AI classification
-> Index reconciliation -> Bulk insert into Supabase.
"""
