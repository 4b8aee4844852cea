"""Mega-batch classification prompts.

Two variants share one shape: a role prompt that pins the model to a pure
JSON array, and a task prompt listing every batch item with its 1-based
index so results can be mapped back by position.
"""

# ── Strategic news radar ──────────────────────────────────────────────────────
NEWS_CATEGORIES = [
    ("COMPETITOR_MOVE", "Aktivitas kompetitor strategis (ekspansi, promo besar, akuisisi, tutup cabang)"),
    ("REGULATORY_CHANGE", "Perubahan regulasi BPOM/Kemenkes (izin edar, aturan baru, recall)"),
    ("PUBLIC_HEALTH_ISSUE", "Isu kesehatan masyarakat (wabah, KLB, outbreak, pandemi)"),
    ("PRODUCT_SAFETY", "Keamanan produk (obat palsu, obat ilegal, produk ditarik, recall)"),
    ("COMPETITOR_UPDATE", "Berita umum kompetitor (CSR, penghargaan, liputan acara biasa)"),
]

NEWS_SYSTEM_PROMPT = """\
Kamu adalah Analis Strategi Farmasi senior untuk Apotek Alpro (200+ cabang, \
Jabodetabek & Bandung). Kamu HANYA merespons dalam format JSON Array murni, \
tanpa teks tambahan atau markdown code block.\
"""

NEWS_USER_TEMPLATE = """\
Klasifikasikan dan analisis daftar berita berikut secara kolektif.

═══════════════════════════════════════════════════
KATEGORI KLASIFIKASI
═══════════════════════════════════════════════════
{categories}

═══════════════════════════════════════════════════
DAFTAR BERITA ({n_items} berita)
═══════════════════════════════════════════════════
{news_list}

═══════════════════════════════════════════════════
INSTRUKSI
═══════════════════════════════════════════════════
1. Analisis setiap berita dan tentukan kategorinya.
2. Berikan Impact Score (0-10) berdasarkan dampak terhadap bisnis apotek retail.
3. Untuk Kategori 1-4, HANYA kembalikan berita dengan Score > {threshold}.
4. KHUSUS Kategori 5 (COMPETITOR_UPDATE), kembalikan SEMUA berita yang masuk kategori ini, dengan Score berapapun.
5. Berikan recommendation yang actionable (boleh kosong untuk COMPETITOR_UPDATE).
6. WAJIB sertakan nomor urut berita ("index") dan judul aslinya ("title") dari daftar di atas.

FORMAT OUTPUT JSON ARRAY MURNI:
[{{"index": 1, "title": "judul berita", "category": "COMPETITOR_MOVE", "score": 9, "reason": "alasan singkat", "recommendation": "langkah aksi"}}]
Jika tidak ada yang relevan untuk dikembalikan, kembalikan array kosong [].
"""

# ── Customer review pulse ─────────────────────────────────────────────────────
REVIEW_CATEGORIES = [
    ("POSITIVE", "Pujian, kepuasan, umum"),
    ("STOK_ISSUE", "Keluhan barang habis/kosong/tidak lengkap"),
    ("SERVICE_ISSUE", "Keluhan pelayanan lambat, jutek, antri, salah obat"),
]

REVIEW_SYSTEM_PROMPT = """\
Kamu adalah Customer Experience Manager Apotek Alpro. Kamu HANYA merespons \
dalam format JSON Array murni, tanpa teks tambahan atau markdown code block.\
"""

REVIEW_USER_TEMPLATE = """\
Klasifikasikan {n_items} ulasan berikut ke dalam kategori sentimen operasional.

KATEGORI TARGET:
{categories}

DAFTAR REVIEW:
{review_list}

INSTRUKSI:
- Analisa berdasarkan konteks komentar.
- Abaikan rating angka, fokus pada teks.
- Kembalikan JSON Array berisi klasifikasi untuk SETIAP review, urut sesuai input.

FORMAT OUTPUT JSON ARRAY MURNI:
[{{"index": 1, "category": "POSITIVE"}}, {{"index": 2, "category": "STOK_ISSUE"}}, ...]
"""


def format_categories(categories: list[tuple[str, str]]) -> str:
    return "\n".join(f"{i}. {name} - {desc}" for i, (name, desc) in enumerate(categories, start=1))
