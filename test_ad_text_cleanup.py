import unittest

from ad_text_cleanup import BLOCK_MARKER, AdTextCleaner, build_line_stream, normalize_linear_text


class TestAdTextCleaner(unittest.TestCase):
    def setUp(self):
        self.cleaner = AdTextCleaner()

    def test_post_process_splits_fused_lines(self):
        raw = (
            "\x00\x00  스마트 안경  \x00\x00\x00 Acme acme.co.kr 네이버페이 \x00"
            "Buy Now\x00Great deals here\x00\x00 \x00광고집행기간 3개월\x00"
        )
        cleaned = self.cleaner.post_process_text(raw)
        self.assertEqual(cleaned.split('\n'), [
            '스마트 안경',
            'Acme',
            'acme.co.kr',
            '네이버페이',
            'Buy Now',
            'Great deals here',
            '광고집행기간',
            '3개월',
        ])

    def test_blank_lines_collapsed_and_trimmed(self):
        cleaned = self.cleaner.post_process_text("  \n\nA  \n \n \n\nB\n\n")
        self.assertEqual(cleaned, "A\n\nB")

    def test_markers_separated_by_spaces_are_one_boundary(self):
        raw = BLOCK_MARKER + " " + BLOCK_MARKER + "A" + BLOCK_MARKER + " \t" + BLOCK_MARKER + "B"
        self.assertEqual(self.cleaner.post_process_text(raw), "A\nB")

    def test_domain_fused_with_following_text(self):
        cleaned = self.cleaner.post_process_text("Acme acme.co.kr네이버페이")
        self.assertEqual(cleaned, "Acme\nacme.co.kr\n네이버페이")

    def test_domain_ending_sentence_is_left_alone(self):
        self.assertEqual(self.cleaner.post_process_text("Visit acme.com."), "Visit acme.com.")

    def test_decimal_numbers_are_not_split(self):
        self.assertEqual(self.cleaner.post_process_text("평점 4.8 무게 3.5kg"), "평점 4.8 무게 3.5kg")

    def test_post_process_is_idempotent(self):
        samples = [
            "\x00Acme acme.co.kr 네이버페이\x00\x00 \x00광고집행기간6개월\x00\x00\n\n\n\nTail  ",
            "one two.com three four.net five\n\n\n\nsix",
            "",
        ]
        for raw in samples:
            once = self.cleaner.post_process_text(raw)
            self.assertEqual(self.cleaner.post_process_text(once), once)

    def test_output_invariants(self):
        cleaned = normalize_linear_text("\x00 a \x00\x00 \n\n\n \x00 b \x00   \x00")
        self.assertNotIn("\n\n\n", cleaned)
        for line in cleaned.split('\n'):
            self.assertEqual(line, line.strip())

    def test_build_line_stream_drops_blank_and_noise(self):
        lines = build_line_stream("  Acme \n\n1\n다음페이지\nacme.co.kr\n  \n")
        self.assertEqual(lines, ('Acme', 'acme.co.kr'))

    def test_empty_input(self):
        self.assertEqual(self.cleaner.post_process_text(""), "")
        self.assertEqual(self.cleaner.build_line_stream(""), ())
        self.assertEqual(self.cleaner.build_line_stream(None), ())

    def test_cleanup_stats(self):
        stats = self.cleaner.get_cleanup_stats("A\n\nB\n2", "A\n\nB\n2")
        self.assertEqual(stats['original_lines'], 3)
        self.assertEqual(stats['stream_lines'], 2)
        self.assertEqual(stats['noise_lines_removed'], 1)


if __name__ == '__main__':
    unittest.main()
